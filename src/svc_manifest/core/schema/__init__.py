"""svc-manifest — Schema (core).

 - SchemaRegistry: tabela estática tipo → definição de componente
 - schema mestre do manifest
 - SchemaValidator: validação exaustiva por passada (jsonschema)
"""

from .master import (  # noqa: F401
    CAPABILITY_PATTERN,
    IDENTIFIER_PATTERN,
    REQUIRED_TOP_LEVEL_FIELDS,
    compose_master_schema,
)
from .registry import (  # noqa: F401
    ComponentDefinition,
    Normalizer,
    SchemaRegistry,
    identity_normalizer,
)
from .validator import SchemaValidator, format_path, summarize  # noqa: F401
