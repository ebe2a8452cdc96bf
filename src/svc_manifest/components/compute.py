# src/svc_manifest/components/compute.py
"""
Tipos de componente de computação: funções Lambda, serviços ECS e grupos
de auto scaling.

Cada definição fornece apenas os dados da camada 1 (fallbacks), o schema
da configuração resolvida e a normalização específica do tipo. O merge das
cinco camadas pertence exclusivamente ao ConfigResolver.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from svc_manifest.core.context import ResolutionContext
from svc_manifest.core.schema.registry import ComponentDefinition

from .common import (
    ALARM_SCHEMA,
    IMAGE_SCHEMA,
    PORT_SCHEMA,
    REMOVAL_POLICY_SCHEMA,
    RETENTION_SCHEMA,
    STRING_MAP,
    coerce_fields,
    coerce_number,
    ensure_image_tag,
    normalize_retention,
    object_schema,
)


LAMBDA_RUNTIMES = ["nodejs18.x", "nodejs20.x", "python3.11", "python3.12", "java17", "java21"]


# ---------------------------------------------------------------------------
# Lambda
# ---------------------------------------------------------------------------

def _lambda_properties() -> Dict[str, Any]:
    return {
        "runtime": {"type": "string", "enum": LAMBDA_RUNTIMES},
        "architecture": {"type": "string", "enum": ["x86_64", "arm64"]},
        "handler": {"type": "string", "minLength": 1},
        "codePath": {"type": "string", "minLength": 1},
        "memorySize": {"type": "integer", "minimum": 128, "maximum": 10240},
        "environment": STRING_MAP,
        "logging": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "logRetentionDays": RETENTION_SCHEMA,
                "logFormat": {"type": "string", "enum": ["JSON", "Text"]},
                "applicationLogLevel": {"type": "string", "enum": ["DEBUG", "INFO", "WARN", "ERROR"]},
            },
        },
        "tracing": {
            "type": "object",
            "additionalProperties": False,
            "properties": {"mode": {"type": "string", "enum": ["Active", "PassThrough"]}},
        },
        "monitoring": {
            "type": "object",
            "properties": {
                "enabled": {"type": "boolean"},
                "alarms": {"type": "object", "additionalProperties": ALARM_SCHEMA},
            },
        },
    }


def _normalize_lambda(timeout_key: str):
    def normalize(config: Dict[str, Any], ctx: ResolutionContext) -> Tuple[Dict[str, Any], List[str]]:
        coerce_fields(config, ("memorySize", timeout_key))
        warnings = normalize_retention(config.get("logging"), "logRetentionDays")
        return config, warnings

    return normalize


_LAMBDA_API_SCHEMA = object_schema(
    dict(
        _lambda_properties(),
        timeout={"type": "integer", "minimum": 1, "maximum": 900},
        api={
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "stageName": {"type": "string", "minLength": 1},
                "cors": {"type": "boolean"},
                "throttling": {
                    "type": "object",
                    "properties": {
                        "rateLimit": {"type": "integer", "minimum": 0},
                        "burstLimit": {"type": "integer", "minimum": 0},
                    },
                },
            },
        },
    ),
    required=["runtime", "handler", "memorySize", "timeout"],
)

LAMBDA_API = ComponentDefinition(
    type="lambda-api",
    description="Função Lambda exposta via API Gateway.",
    schema=_LAMBDA_API_SCHEMA,
    fallbacks={
        "runtime": "nodejs20.x",
        "architecture": "x86_64",
        "handler": "index.handler",
        "codePath": "./src",
        "memorySize": 512,
        "timeout": 30,
        "environment": {},
        "logging": {"logRetentionDays": 30, "logFormat": "JSON", "applicationLogLevel": "INFO"},
        "tracing": {"mode": "PassThrough"},
        "api": {"stageName": "api", "cors": False},
        "monitoring": {"enabled": False, "alarms": {}},
    },
    normalize=_normalize_lambda("timeout"),
)

_LAMBDA_WORKER_SCHEMA = object_schema(
    dict(
        _lambda_properties(),
        timeoutSeconds={"type": "integer", "minimum": 1, "maximum": 900},
        eventSources={
            "type": "array",
            "items": {
                "type": "object",
                "required": ["type"],
                "properties": {
                    "type": {"type": "string", "enum": ["sqs", "schedule", "eventbridge"]},
                    "queue": {"type": "string"},
                    "schedule": {"type": "string"},
                    "batchSize": {"type": "integer", "minimum": 1, "maximum": 10000},
                },
            },
        },
    ),
    required=["runtime", "handler", "memorySize", "timeoutSeconds"],
)

LAMBDA_WORKER = ComponentDefinition(
    type="lambda-worker",
    description="Função Lambda assíncrona acionada por filas ou agendamentos.",
    schema=_LAMBDA_WORKER_SCHEMA,
    fallbacks={
        "runtime": "nodejs20.x",
        "architecture": "x86_64",
        "handler": "index.handler",
        "codePath": "./src",
        "memorySize": 256,
        "timeoutSeconds": 300,
        "environment": {},
        "eventSources": [],
        "logging": {"logRetentionDays": 30, "logFormat": "JSON", "applicationLogLevel": "INFO"},
        "tracing": {"mode": "PassThrough"},
        "monitoring": {"enabled": False, "alarms": {}},
    },
    normalize=_normalize_lambda("timeoutSeconds"),
)


# ---------------------------------------------------------------------------
# ECS
# ---------------------------------------------------------------------------

_SERVICE_LOGGING_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "createLogGroup": {"type": "boolean"},
        "streamPrefix": {"type": "string", "minLength": 1},
        "retentionInDays": RETENTION_SCHEMA,
        "removalPolicy": REMOVAL_POLICY_SCHEMA,
    },
}

_SERVICE_AUTOSCALING_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "minCapacity": {"type": "integer", "minimum": 0},
        "maxCapacity": {"type": "integer", "minimum": 1},
        "targetCpuUtilization": {"type": "integer", "minimum": 1, "maximum": 100},
    },
}

_SERVICE_LOGGING_FALLBACK = {
    "createLogGroup": True,
    "streamPrefix": "service",
    "retentionInDays": 30,
    "removalPolicy": "retain",
}


def clamp_capacity(
    scaling: Any,
    *,
    min_key: str = "minCapacity",
    max_key: str = "maxCapacity",
    desired_key: str = "",
) -> List[str]:
    """Garante `min <= desired <= max`; retorna warnings dos ajustes."""
    if not isinstance(scaling, dict):
        return []

    for key in (min_key, max_key, desired_key):
        if key and key in scaling:
            scaling[key] = coerce_number(scaling[key])

    low, high = scaling.get(min_key), scaling.get(max_key)
    if not (isinstance(low, int) and isinstance(high, int)):
        return []

    warnings: List[str] = []
    if high < low:
        scaling[max_key] = low
        high = low
        warnings.append(f"{max_key} raised to {min_key} ({low})")

    if desired_key:
        desired = scaling.get(desired_key)
        if isinstance(desired, int) and not low <= desired <= high:
            clamped = min(max(desired, low), high)
            scaling[desired_key] = clamped
            warnings.append(f"{desired_key} clamped from {desired} to {clamped}")

    return warnings


def _normalize_fargate(config: Dict[str, Any], ctx: ResolutionContext) -> Tuple[Dict[str, Any], List[str]]:
    coerce_fields(config, ("cpu", "memory", "port", "desiredCount"))
    ensure_image_tag(config)
    warnings = normalize_retention(config.get("logging"), "retentionInDays")
    warnings.extend(clamp_capacity(config.get("autoScaling")))
    return config, warnings


ECS_FARGATE_SERVICE = ComponentDefinition(
    type="ecs-fargate-service",
    description="Serviço ECS em Fargate.",
    schema=object_schema(
        {
            "cpu": {"type": "integer", "enum": [256, 512, 1024, 2048, 4096]},
            "memory": {"type": "integer", "minimum": 512, "maximum": 30720},
            "port": PORT_SCHEMA,
            "desiredCount": {"type": "integer", "minimum": 0},
            "image": IMAGE_SCHEMA,
            "environment": STRING_MAP,
            "secrets": STRING_MAP,
            "deploymentStrategy": {
                "type": "object",
                "properties": {"type": {"type": "string", "enum": ["rolling", "blue-green", "canary"]}},
            },
            "autoScaling": _SERVICE_AUTOSCALING_SCHEMA,
            "logging": _SERVICE_LOGGING_SCHEMA,
            "monitoring": {
                "type": "object",
                "properties": {
                    "enabled": {"type": "boolean"},
                    "alarms": {"type": "object", "additionalProperties": ALARM_SCHEMA},
                },
            },
        },
        required=["cpu", "memory", "port", "image"],
    ),
    fallbacks={
        "cpu": 256,
        "memory": 512,
        "port": 8080,
        "desiredCount": 1,
        "image": {"repository": "public.ecr.aws/amazonlinux/amazonlinux"},
        "environment": {},
        "secrets": {},
        "deploymentStrategy": {"type": "rolling"},
        "logging": dict(_SERVICE_LOGGING_FALLBACK),
        "monitoring": {"enabled": True, "alarms": {}},
    },
    normalize=_normalize_fargate,
)


def _normalize_ec2_service(config: Dict[str, Any], ctx: ResolutionContext) -> Tuple[Dict[str, Any], List[str]]:
    coerce_fields(config, ("taskCpu", "taskMemory", "port", "desiredCount"))
    ensure_image_tag(config)
    return config, normalize_retention(config.get("logging"), "retentionInDays")


ECS_EC2_SERVICE = ComponentDefinition(
    type="ecs-ec2-service",
    description="Serviço ECS em instâncias EC2 de um cluster.",
    schema=object_schema(
        {
            "taskCpu": {"type": "integer", "minimum": 128},
            "taskMemory": {"type": "integer", "minimum": 128},
            "port": PORT_SCHEMA,
            "desiredCount": {"type": "integer", "minimum": 0},
            "image": IMAGE_SCHEMA,
            "environment": STRING_MAP,
            "secrets": STRING_MAP,
            "placementConstraints": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["type"],
                    "properties": {
                        "type": {"type": "string", "enum": ["distinctInstance", "memberOf"]},
                        "expression": {"type": "string"},
                    },
                },
            },
            "placementStrategies": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["type"],
                    "properties": {
                        "type": {"type": "string", "enum": ["spread", "binpack", "random"]},
                        "field": {"type": "string"},
                    },
                },
            },
            "logging": _SERVICE_LOGGING_SCHEMA,
        },
        required=["taskCpu", "taskMemory", "port", "image"],
    ),
    fallbacks={
        "taskCpu": 256,
        "taskMemory": 512,
        "port": 8080,
        "desiredCount": 1,
        "image": {"repository": "public.ecr.aws/amazonlinux/amazonlinux"},
        "environment": {},
        "secrets": {},
        "placementConstraints": [],
        "placementStrategies": [{"type": "spread", "field": "attribute:ecs.availability-zone"}],
        "logging": dict(_SERVICE_LOGGING_FALLBACK),
    },
    normalize=_normalize_ec2_service,
)


# ---------------------------------------------------------------------------
# Auto Scaling Group
# ---------------------------------------------------------------------------

def _normalize_asg(config: Dict[str, Any], ctx: ResolutionContext) -> Tuple[Dict[str, Any], List[str]]:
    storage = config.get("storage")
    if isinstance(storage, dict) and "rootVolumeSize" in storage:
        storage["rootVolumeSize"] = coerce_number(storage["rootVolumeSize"])

    warnings = clamp_capacity(config.get("autoScaling"), desired_key="desiredCapacity")
    return config, warnings


AUTO_SCALING_GROUP = ComponentDefinition(
    type="auto-scaling-group",
    description="Grupo de auto scaling EC2 com launch template.",
    schema=object_schema(
        {
            "launchTemplate": {
                "type": "object",
                "required": ["instanceType"],
                "additionalProperties": False,
                "properties": {
                    "instanceType": {"type": "string", "pattern": r"^[a-z][a-z0-9-]*\.[a-z0-9]+$"},
                    "amiId": {"type": "string", "pattern": r"^ami-[0-9a-f]+$"},
                    "detailedMonitoring": {"type": "boolean"},
                    "requireImdsv2": {"type": "boolean"},
                },
            },
            "autoScaling": {
                "type": "object",
                "required": ["minCapacity", "maxCapacity"],
                "additionalProperties": False,
                "properties": {
                    "minCapacity": {"type": "integer", "minimum": 0},
                    "maxCapacity": {"type": "integer", "minimum": 1},
                    "desiredCapacity": {"type": "integer", "minimum": 0},
                },
            },
            "storage": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "rootVolumeSize": {"type": "integer", "minimum": 8, "maximum": 16384},
                    "rootVolumeType": {"type": "string", "enum": ["gp2", "gp3", "io1", "io2"]},
                    "encrypted": {"type": "boolean"},
                },
            },
            "healthCheck": {
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": ["EC2", "ELB"]},
                    "gracePeriod": {"type": "integer", "minimum": 0},
                },
            },
            "terminationPolicies": {
                "type": "array",
                "items": {
                    "type": "string",
                    "enum": ["Default", "OldestInstance", "NewestInstance", "OldestLaunchTemplate"],
                },
            },
            "vpc": {
                "type": "object",
                "properties": {
                    "subnetType": {"type": "string", "enum": ["PUBLIC", "PRIVATE", "ISOLATED"]},
                    "allowAllOutbound": {"type": "boolean"},
                },
            },
        },
        required=["launchTemplate", "autoScaling"],
    ),
    fallbacks={
        "launchTemplate": {"instanceType": "t3.micro", "detailedMonitoring": False, "requireImdsv2": False},
        "autoScaling": {"minCapacity": 1, "maxCapacity": 3, "desiredCapacity": 2},
        "storage": {"rootVolumeSize": 20, "rootVolumeType": "gp3", "encrypted": False},
        "healthCheck": {"type": "EC2", "gracePeriod": 300},
        "terminationPolicies": ["Default"],
        "vpc": {"subnetType": "PUBLIC", "allowAllOutbound": True},
    },
    normalize=_normalize_asg,
)


COMPUTE_DEFINITIONS = (LAMBDA_API, LAMBDA_WORKER, ECS_FARGATE_SERVICE, ECS_EC2_SERVICE, AUTO_SCALING_GROUP)
