"""ManifestParser — texto bruto → esqueleto tipado do Manifest.

Este estágio verifica apenas o shape mínimo para que os estágios seguintes
possam prosseguir. Ele não consulta o SchemaRegistry e é fail-fast: a
primeira falha estrutural interrompe o parsing.

Notas:
- YAML é o formato do manifest; um documento JSON também é YAML válido.
- A leitura de arquivo (`read_manifest`) é a única operação bloqueante do
  pipeline e acontece uma única vez, antes de qualquer estágio.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

import yaml

from ..exceptions import ManifestNotFoundError, ParseError
from .model import Manifest


EMPTY_COMPONENTS_MESSAGE = "Manifest must declare at least one component."


def read_manifest(path: Union[str, Path]) -> str:
    """Lê o arquivo de manifest (UTF-8).

    Raises:
        ManifestNotFoundError: se o arquivo não existir.
    """
    p = Path(path)
    if not p.is_file():
        raise ManifestNotFoundError(
            f"Manifest file not found: {p}",
            details={"path": str(p)},
            hint="Verifique o caminho do manifest informado ao comando.",
        )
    return p.read_text(encoding="utf-8")


def _load_document(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        details = {}
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            details = {"line": mark.line + 1, "column": mark.column + 1}
        raise ParseError(
            f"Invalid YAML syntax: {e}",
            details=details,
            hint="Corrija a sintaxe YAML (indentação, dois-pontos, tabs).",
        ) from e


def parse_manifest(text: str) -> Manifest:
    """Converte o texto do manifest em um `Manifest` (sem validação profunda).

    Raises:
        ParseError: documento inválido, raiz que não é mapa, `service`
            ausente/não-string ou `components` ausente/não-lista/vazio.
    """
    if not isinstance(text, str):
        raise ParseError(f"Manifest text must be a string, got: {type(text).__name__}")

    data = _load_document(text)

    if data is None:
        raise ParseError("Manifest document is empty")

    if not isinstance(data, dict):
        raise ParseError(
            "Manifest root must be a mapping/object",
            details={"root_type": type(data).__name__},
        )

    if "service" not in data or data.get("service") is None:
        raise ParseError(
            "Manifest must declare a 'service' name.",
            details={"field": "service"},
        )
    if not isinstance(data["service"], str):
        raise ParseError(
            "Manifest field 'service' must be a string",
            details={"field": "service", "value_type": type(data["service"]).__name__},
        )

    components = data.get("components")
    if components is None:
        raise ParseError(
            "Manifest must declare a 'components' list.",
            details={"field": "components"},
        )
    if not isinstance(components, list):
        raise ParseError(
            "Manifest field 'components' must be a list",
            details={"field": "components", "value_type": type(components).__name__},
        )
    if not components:
        raise ParseError(EMPTY_COMPONENTS_MESSAGE, details={"field": "components"})

    return Manifest.from_dict(data)
