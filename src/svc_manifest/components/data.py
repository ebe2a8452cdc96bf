# src/svc_manifest/components/data.py
"""Tipos de componente de dados: banco relacional, cache, bucket e fila."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from svc_manifest.core.context import ResolutionContext
from svc_manifest.core.schema.registry import ComponentDefinition

from .common import (
    PORT_SCHEMA,
    REMOVAL_POLICY_SCHEMA,
    RETENTION_SCHEMA,
    coerce_fields,
    normalize_retention,
    object_schema,
)


# ---------------------------------------------------------------------------
# RDS Postgres
# ---------------------------------------------------------------------------

def _normalize_rds(config: Dict[str, Any], ctx: ResolutionContext) -> Tuple[Dict[str, Any], List[str]]:
    instance = config.get("instance")
    if isinstance(instance, dict):
        coerce_fields(instance, ("allocatedStorage",))
    backup = config.get("backup")
    if isinstance(backup, dict):
        coerce_fields(backup, ("retentionDays",))
    return config, normalize_retention(config.get("logging"), "retentionInDays")


RDS_POSTGRES = ComponentDefinition(
    type="rds-postgres",
    description="Instância RDS PostgreSQL.",
    schema=object_schema(
        {
            "dbName": {"type": "string", "pattern": r"^[A-Za-z][A-Za-z0-9_]*$"},
            "username": {"type": "string", "minLength": 1},
            "port": PORT_SCHEMA,
            "instance": {
                "type": "object",
                "required": ["engineVersion", "instanceType", "allocatedStorage"],
                "additionalProperties": False,
                "properties": {
                    "engineVersion": {"type": "string", "pattern": r"^\d+(\.\d+)?$"},
                    "instanceType": {"type": "string", "pattern": r"^[a-z][a-z0-9-]*\.[a-z0-9]+$"},
                    "allocatedStorage": {"type": "integer", "minimum": 20, "maximum": 65536},
                    "multiAz": {"type": "boolean"},
                    "publiclyAccessible": {"type": "boolean"},
                    "deletionProtection": {"type": "boolean"},
                    "removalPolicy": REMOVAL_POLICY_SCHEMA,
                },
            },
            "encryption": {
                "type": "object",
                "properties": {"enabled": {"type": "boolean"}},
            },
            "backup": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "retentionDays": {"type": "integer", "minimum": 0, "maximum": 35},
                    "copyTagsToSnapshots": {"type": "boolean"},
                },
            },
            "logging": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "exportPostgresLogs": {"type": "boolean"},
                    "retentionInDays": RETENTION_SCHEMA,
                },
            },
        },
        required=["instance"],
    ),
    fallbacks={
        "username": "postgres",
        "port": 5432,
        "instance": {
            "engineVersion": "15.4",
            "instanceType": "t3.micro",
            "allocatedStorage": 20,
            "multiAz": False,
            "publiclyAccessible": False,
            "deletionProtection": False,
            "removalPolicy": "destroy",
        },
        "encryption": {"enabled": False},
        "backup": {"retentionDays": 7, "copyTagsToSnapshots": True},
        "logging": {"exportPostgresLogs": False, "retentionInDays": 30},
    },
    normalize=_normalize_rds,
)


# ---------------------------------------------------------------------------
# ElastiCache Redis
# ---------------------------------------------------------------------------

def _normalize_redis(config: Dict[str, Any], ctx: ResolutionContext) -> Tuple[Dict[str, Any], List[str]]:
    coerce_fields(config, ("numCacheNodes", "port", "snapshotRetentionDays"))

    warnings: List[str] = []
    nodes = config.get("numCacheNodes")
    if config.get("automaticFailover") is True and isinstance(nodes, int) and nodes < 2:
        config["automaticFailover"] = False
        warnings.append("automatic failover requires at least two cache nodes; disabled")
    return config, warnings


ELASTICACHE_REDIS = ComponentDefinition(
    type="elasticache-redis",
    description="Cluster ElastiCache Redis.",
    schema=object_schema(
        {
            "nodeType": {"type": "string", "pattern": r"^cache\.[a-z0-9]+\.[a-z0-9]+$"},
            "engineVersion": {"type": "string"},
            "numCacheNodes": {"type": "integer", "minimum": 1, "maximum": 40},
            "port": PORT_SCHEMA,
            "automaticFailover": {"type": "boolean"},
            "transitEncryption": {"type": "boolean"},
            "atRestEncryption": {"type": "boolean"},
            "snapshotRetentionDays": {"type": "integer", "minimum": 0, "maximum": 35},
        },
        required=["nodeType", "numCacheNodes"],
    ),
    fallbacks={
        "nodeType": "cache.t3.micro",
        "engineVersion": "7.0",
        "numCacheNodes": 1,
        "port": 6379,
        "automaticFailover": False,
        "transitEncryption": True,
        "atRestEncryption": True,
        "snapshotRetentionDays": 0,
    },
    normalize=_normalize_redis,
)


# ---------------------------------------------------------------------------
# S3 Bucket
# ---------------------------------------------------------------------------

S3_BUCKET = ComponentDefinition(
    type="s3-bucket",
    description="Bucket S3.",
    schema=object_schema(
        {
            "bucketName": {"type": "string", "pattern": r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$"},
            "public": {"type": "boolean"},
            "versioning": {"type": "boolean"},
            "eventBridgeEnabled": {"type": "boolean"},
            "encryption": {
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": ["AES256", "KMS"]},
                    "kmsKeyArn": {"type": "string"},
                },
            },
            "lifecycleRules": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["id"],
                    "properties": {
                        "id": {"type": "string", "minLength": 1},
                        "enabled": {"type": "boolean"},
                        "expirationDays": {"type": "integer", "minimum": 1},
                    },
                },
            },
            "security": {
                "type": "object",
                "properties": {
                    "blockPublicAccess": {"type": "boolean"},
                    "requireSecureTransport": {"type": "boolean"},
                },
            },
            "compliance": {
                "type": "object",
                "properties": {
                    "auditLogging": {"type": "boolean"},
                    "objectLock": {
                        "type": "object",
                        "properties": {
                            "enabled": {"type": "boolean"},
                            "retentionDays": {"type": "integer", "minimum": 1},
                        },
                    },
                },
            },
        },
    ),
    fallbacks={
        "public": False,
        "versioning": True,
        "eventBridgeEnabled": False,
        "encryption": {"type": "AES256"},
        "lifecycleRules": [],
        "security": {"blockPublicAccess": True, "requireSecureTransport": True},
        "compliance": {"auditLogging": False, "objectLock": {"enabled": False}},
    },
)


# ---------------------------------------------------------------------------
# SQS Queue
# ---------------------------------------------------------------------------

def _normalize_sqs(config: Dict[str, Any], ctx: ResolutionContext) -> Tuple[Dict[str, Any], List[str]]:
    coerce_fields(config, ("visibilityTimeout", "messageRetentionPeriod"))
    dlq = config.get("deadLetterQueue")
    if isinstance(dlq, dict):
        coerce_fields(dlq, ("maxReceiveCount",))
    return config, []


SQS_QUEUE = ComponentDefinition(
    type="sqs-queue",
    description="Fila SQS (standard ou FIFO).",
    schema=object_schema(
        {
            "fifo": {"type": "boolean"},
            "visibilityTimeout": {"type": "integer", "minimum": 0, "maximum": 43200},
            "messageRetentionPeriod": {"type": "integer", "minimum": 60, "maximum": 1209600},
            "encryption": {"type": "string", "enum": ["SQS_MANAGED", "KMS"]},
            "deadLetterQueue": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "enabled": {"type": "boolean"},
                    "maxReceiveCount": {"type": "integer", "minimum": 1, "maximum": 1000},
                },
            },
        },
    ),
    fallbacks={
        "fifo": False,
        "visibilityTimeout": 30,
        "messageRetentionPeriod": 345600,
        "encryption": "SQS_MANAGED",
        "deadLetterQueue": {"enabled": False, "maxReceiveCount": 3},
    },
    normalize=_normalize_sqs,
)


DATA_DEFINITIONS = (RDS_POSTGRES, ELASTICACHE_REDIS, S3_BUCKET, SQS_QUEUE)
