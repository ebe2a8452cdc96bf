# src/svc_manifest/core/config/loader.py
"""
Leitura dos defaults de plataforma a partir de arquivos.

Fontes, da menor para a maior prioridade:
    - arquivo de defaults (obrigatório; o catálogo built-in embarca um)
    - arquivo local de overrides (opcional; ignorado quando não existe)

As fontes são combinadas com a mesma política de merge usada pelo
ConfigResolver e então convertidas em `PlatformDefaults`, que valida as
seções raiz. O resolver nunca lê arquivos: recebe o valor já carregado.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TextIO

import yaml

from .errors import DefaultsNotFoundError, InvalidConfigRootTypeError, UnsupportedConfigFormatError
from .merge import deep_merge
from .platform import PlatformDefaults


_READERS: Dict[str, Callable[[TextIO], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.load,
}


def read_defaults_document(path: Path) -> Dict[str, Any]:
    """Lê um arquivo de defaults; documento vazio equivale a `{}`."""
    if not path.is_file():
        raise DefaultsNotFoundError(
            f"Platform defaults file not found: {path}",
            details={"path": str(path)},
        )

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedConfigFormatError(
            f"Unsupported platform defaults format '{path.suffix}' ({path.name})",
            details={"path": str(path), "supported": sorted(_READERS)},
        )

    with path.open("r", encoding="utf-8") as fh:
        document = reader(fh)

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise InvalidConfigRootTypeError(
            f"Platform defaults root must be a mapping, got: {type(document).__name__}",
            details={"path": str(path)},
        )
    return document


def load_platform_defaults(*, defaults_path: str, local_path: Optional[str] = None) -> PlatformDefaults:
    """
    Carrega os defaults de plataforma, aplicando o override local quando existir.

    Raises:
        DefaultsNotFoundError: arquivo de defaults ausente.
        UnsupportedConfigFormatError: extensão não suportada.
        InvalidConfigRootTypeError: raiz ou seção com shape inválido.
    """
    document = read_defaults_document(Path(defaults_path))

    if local_path is not None and Path(local_path).exists():
        document = deep_merge(document, read_defaults_document(Path(local_path)))

    return PlatformDefaults.from_dict(document)
