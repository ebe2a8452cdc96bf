# src/svc_manifest/components/common.py
"""
Fragmentos de schema e helpers de normalização compartilhados pelos tipos
de componente built-in.

Os helpers de normalização recebem a configuração já mergeada (uma cópia
própria do resolver) e retornam warnings; nunca levantam exceções: valores
que não puderem ser normalizados seguem adiante para o SchemaValidator.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence


LOG_RETENTION_DAYS = (
    1, 3, 5, 7, 14, 30, 60, 90, 120, 150, 180, 365, 400,
    545, 731, 1096, 1827, 2192, 2557, 2922, 3288, 3653,
)
DEFAULT_LOG_RETENTION_DAYS = 30
RETENTION_WARNING = "requested log retention unsupported, defaulted to one month"

_INT_TEXT = re.compile(r"^-?\d+$")
_FLOAT_TEXT = re.compile(r"^-?\d+\.\d+$")


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

STRING_MAP: Dict[str, Any] = {"type": "object", "additionalProperties": {"type": "string"}}

RETENTION_SCHEMA: Dict[str, Any] = {"type": "integer", "enum": list(LOG_RETENTION_DAYS)}

REMOVAL_POLICY_SCHEMA: Dict[str, Any] = {"type": "string", "enum": ["retain", "destroy", "snapshot"]}

PORT_SCHEMA: Dict[str, Any] = {"type": "integer", "minimum": 1, "maximum": 65535}

ALARM_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "enabled": {"type": "boolean"},
        "threshold": {"type": "number"},
        "evaluationPeriods": {"type": "integer", "minimum": 1},
        "statistic": {"type": "string", "enum": ["Average", "Sum", "Maximum", "Minimum"]},
        "comparisonOperator": {"type": "string", "enum": ["gt", "gte", "lt", "lte"]},
    },
}

IMAGE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["repository", "tag"],
    "additionalProperties": False,
    "properties": {
        "repository": {"type": "string", "minLength": 1},
        "tag": {"type": "string", "minLength": 1},
    },
}


def object_schema(properties: Dict[str, Any], *, required: Sequence[str] = ()) -> Dict[str, Any]:
    """Schema de objeto fechado (`additionalProperties: false`)."""
    schema: Dict[str, Any] = {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "additionalProperties": False,
        "properties": properties,
    }
    if required:
        schema["required"] = list(required)
    return schema


# ---------------------------------------------------------------------------
# Normalização
# ---------------------------------------------------------------------------

def coerce_number(value: Any) -> Any:
    """Converte strings numéricas (`"512"`, `"0.5"`) em números; o resto passa intacto."""
    if isinstance(value, str):
        text = value.strip()
        if _INT_TEXT.match(text):
            return int(text)
        if _FLOAT_TEXT.match(text):
            return float(text)
    return value


def coerce_fields(config: Dict[str, Any], keys: Sequence[str]) -> None:
    for key in keys:
        if key in config:
            config[key] = coerce_number(config[key])


def normalize_retention(section: Optional[Dict[str, Any]], key: str) -> List[str]:
    """Garante que `section[key]` seja uma retenção de log suportada.

    Valores não suportados viram um mês (30 dias), com warning.
    """
    if not isinstance(section, dict) or key not in section:
        return []

    value = coerce_number(section[key])
    if isinstance(value, bool) or value not in LOG_RETENTION_DAYS:
        section[key] = DEFAULT_LOG_RETENTION_DAYS
        return [f"{RETENTION_WARNING} (requested {key}={value!r})"]

    section[key] = value
    return []


def ensure_image_tag(config: Dict[str, Any], default_tag: str = "latest") -> None:
    image = config.get("image")
    if isinstance(image, dict) and not image.get("tag"):
        image["tag"] = default_tag
