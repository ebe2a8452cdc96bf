"""
Identidade estrutural de uma configuração resolvida.

O `config_hash` de um componente é o SHA-256 da sua forma JSON canônica
(chaves ordenadas, separadores compactos, UTF-8). Duas resoluções com as
mesmas entradas devem produzir o mesmo hash; é o que os testes de
determinismo e o log de `plan completed` observam.
"""

import hashlib
import json
from typing import Any, Dict

SHORT_HASH_LENGTH = 12


def canonical_json(config: Dict[str, Any]) -> str:
    return json.dumps(config, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


def compute_config_hash(config: Dict[str, Any]) -> str:
    """SHA-256 hexadecimal (64 caracteres) da configuração.

    Raises:
        TypeError: a configuração não é um dict.
    """
    if not isinstance(config, dict):
        raise TypeError(f"Resolved config must be a dict, got: {type(config).__name__}")
    digest = hashlib.sha256()
    digest.update(canonical_json(config).encode("utf-8"))
    return digest.hexdigest()


def short_hash(config_hash: str) -> str:
    """Prefixo usado em eventos e relatórios."""
    return config_hash[:SHORT_HASH_LENGTH]
