# src/svc_manifest/core/config/__init__.py

"""
Camada de configuração de plataforma.

Responsabilidades do pacote:
    - Carregamento dos defaults de plataforma (defaults + overrides locais)
    - Merge em camadas determinístico (política única para todos os componentes)
    - Hash canônico da configuração resolvida

Princípios fundamentais:
    - Nenhuma heurística implícita durante merge
    - A mesma entrada sempre produz a mesma configuração final
"""

from .errors import (  # noqa: F401
    ConfigError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import canonical_json, compute_config_hash, short_hash  # noqa: F401
from .loader import load_platform_defaults  # noqa: F401
from .merge import UNSET, deep_merge, merge_layers, prune_unset  # noqa: F401
from .platform import PlatformDefaults  # noqa: F401
