"""
Schema mestre (top-level) do manifest.

O schema mestre descreve apenas o shape do manifest; a configuração de
cada componente é validada depois da resolução, contra o schema do seu tipo
(os valores autorais ainda contêm tokens `${env:...}` e mapas por ambiente
antes da hidratação).
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict

from ..manifest.model import ComplianceFramework


IDENTIFIER_PATTERN = r"^[A-Za-z][A-Za-z0-9_-]*$"
CAPABILITY_PATTERN = r"^[^:\s]+:[^\s]+$"

REQUIRED_TOP_LEVEL_FIELDS = ("service", "owner")

_STRING_MAP = {"type": "object", "additionalProperties": {"type": "string"}}

_BINDING_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["to"],
    "properties": {
        "to": {"type": "string", "minLength": 1},
        "capability": {"type": "string", "pattern": CAPABILITY_PATTERN},
        "access": {"type": "string", "minLength": 1},
        "env": _STRING_MAP,
    },
}

_COMPONENT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name", "type"],
    "properties": {
        "name": {"type": "string", "pattern": IDENTIFIER_PATTERN},
        "type": {"type": "string", "minLength": 1},
        "config": {"type": "object"},
        "binds": {"type": "array", "items": _BINDING_SCHEMA},
    },
}

_SUPPRESSION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "justification": {"type": "string"},
        "owner": {"type": "string"},
        "appliesTo": {
            "type": "array",
            "items": {"type": "object", "properties": {"component": {"type": "string"}}},
        },
    },
}

_MASTER_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Service manifest",
    "type": "object",
    "required": ["components"],
    "properties": {
        "service": {"type": "string", "pattern": IDENTIFIER_PATTERN},
        "owner": {"type": "string", "minLength": 1},
        "complianceFramework": {
            "type": "string",
            "enum": [f.value for f in ComplianceFramework],
        },
        "environment": {"type": "string"},
        "region": {"type": "string"},
        "accountId": {"type": "string"},
        "components": {"type": "array", "minItems": 1, "items": _COMPONENT_SCHEMA},
        "environments": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {"defaults": {"type": "object"}},
            },
        },
        "tags": _STRING_MAP,
        "labels": _STRING_MAP,
        "governance": {
            "type": "object",
            "properties": {
                "cdkNag": {
                    "type": "object",
                    "properties": {
                        "suppress": {"type": "array", "items": _SUPPRESSION_SCHEMA},
                    },
                },
            },
        },
    },
}


def compose_master_schema() -> Dict[str, Any]:
    """Retorna uma cópia do schema mestre.

    `service` e `owner` não aparecem em `required`: a ausência deles é uma
    violação estrutural verificada à parte pelo SchemaValidator
    (MissingRequiredFieldError).
    """
    return deepcopy(_MASTER_SCHEMA)
