"""svc-manifest — Manifest (core).

Componentes canônicos do manifest de serviço:
 - modelo de dados (Manifest, ComponentSpec, Binding, EnvironmentDefaults)
 - parsing estrutural (YAML)
"""

from .model import (  # noqa: F401
    Binding,
    ComplianceFramework,
    ComponentSpec,
    DEFAULT_COMPLIANCE_FRAMEWORK,
    EnvironmentDefaults,
    Manifest,
)
from .parser import EMPTY_COMPONENTS_MESSAGE, parse_manifest, read_manifest  # noqa: F401
