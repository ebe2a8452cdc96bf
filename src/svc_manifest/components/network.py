# src/svc_manifest/components/network.py
"""Tipos de componente de rede e observabilidade."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from svc_manifest.core.context import ResolutionContext
from svc_manifest.core.schema.registry import ComponentDefinition

from .common import (
    REMOVAL_POLICY_SCHEMA,
    RETENTION_SCHEMA,
    coerce_fields,
    normalize_retention,
    object_schema,
)


CIDR_PATTERN = r"^(\d{1,3}\.){3}\d{1,3}/\d{1,2}$"


# ---------------------------------------------------------------------------
# Route 53
# ---------------------------------------------------------------------------

def _normalize_record(config: Dict[str, Any], ctx: ResolutionContext) -> Tuple[Dict[str, Any], List[str]]:
    coerce_fields(config, ("ttl",))
    values = config.get("values")
    if isinstance(values, str):
        config["values"] = [values]
    return config, []


ROUTE53_RECORD = ComponentDefinition(
    type="route53-record",
    description="Registro DNS em uma hosted zone do Route 53.",
    schema=object_schema(
        {
            "zoneName": {"type": "string", "minLength": 1},
            "recordName": {"type": "string", "minLength": 1},
            "recordType": {"type": "string", "enum": ["A", "AAAA", "CNAME", "TXT", "MX", "ALIAS"]},
            "ttl": {"type": "integer", "minimum": 0, "maximum": 172800},
            "values": {"type": "array", "items": {"type": "string"}},
        },
        required=["recordType", "ttl"],
    ),
    fallbacks={"recordType": "CNAME", "ttl": 300, "values": []},
    normalize=_normalize_record,
)


# ---------------------------------------------------------------------------
# VPC
# ---------------------------------------------------------------------------

def _normalize_vpc(config: Dict[str, Any], ctx: ResolutionContext) -> Tuple[Dict[str, Any], List[str]]:
    coerce_fields(config, ("maxAzs", "natGateways"))

    warnings: List[str] = []
    max_azs, nat = config.get("maxAzs"), config.get("natGateways")
    if isinstance(max_azs, int) and isinstance(nat, int) and nat > max_azs:
        config["natGateways"] = max_azs
        warnings.append(f"natGateways reduced from {nat} to maxAzs ({max_azs})")

    warnings.extend(normalize_retention(config.get("flowLogs"), "retentionInDays"))
    return config, warnings


VPC = ComponentDefinition(
    type="vpc",
    description="VPC com sub-redes públicas e privadas.",
    schema=object_schema(
        {
            "cidr": {"type": "string", "pattern": CIDR_PATTERN},
            "maxAzs": {"type": "integer", "minimum": 1, "maximum": 6},
            "natGateways": {"type": "integer", "minimum": 0, "maximum": 6},
            "flowLogs": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "enabled": {"type": "boolean"},
                    "retentionInDays": RETENTION_SCHEMA,
                },
            },
        },
        required=["cidr", "maxAzs", "natGateways"],
    ),
    fallbacks={
        "cidr": "10.0.0.0/16",
        "maxAzs": 2,
        "natGateways": 1,
        "flowLogs": {"enabled": False, "retentionInDays": 30},
    },
    normalize=_normalize_vpc,
)


# ---------------------------------------------------------------------------
# CloudWatch Logs
# ---------------------------------------------------------------------------

def _normalize_log_group(config: Dict[str, Any], ctx: ResolutionContext) -> Tuple[Dict[str, Any], List[str]]:
    return config, normalize_retention(config, "retentionInDays")


CLOUDWATCH_LOG_GROUP = ComponentDefinition(
    type="cloudwatch-log-group",
    description="Log group do CloudWatch Logs.",
    schema=object_schema(
        {
            "logGroupName": {"type": "string", "minLength": 1},
            "retentionInDays": RETENTION_SCHEMA,
            "removalPolicy": REMOVAL_POLICY_SCHEMA,
            "kmsKeyArn": {"type": "string", "pattern": r"^arn:"},
        },
        required=["retentionInDays"],
    ),
    fallbacks={"retentionInDays": 30, "removalPolicy": "retain"},
    normalize=_normalize_log_group,
)


NETWORK_DEFINITIONS = (ROUTE53_RECORD, VPC, CLOUDWATCH_LOG_GROUP)
