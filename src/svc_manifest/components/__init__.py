# src/svc_manifest/components/__init__.py
"""
Catálogo de componentes built-in.

Tabela de registro estática: cada tipo de componente é registrado de forma
explícita, em ordem fixa, no momento da construção do registry. Nenhuma
descoberta dinâmica (import por nome, introspecção de classes) acontece.

Tipos registrados:
    - compute: lambda-api, lambda-worker, ecs-fargate-service,
      ecs-ec2-service, auto-scaling-group
    - data: rds-postgres, elasticache-redis, s3-bucket, sqs-queue
    - network: route53-record, vpc, cloudwatch-log-group
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple, Union

from svc_manifest.core.config.loader import load_platform_defaults
from svc_manifest.core.config.platform import PlatformDefaults
from svc_manifest.core.schema.registry import ComponentDefinition, SchemaRegistry

from .compute import COMPUTE_DEFINITIONS
from .data import DATA_DEFINITIONS
from .network import NETWORK_DEFINITIONS


PLATFORM_DEFAULTS_PATH = Path(__file__).with_name("platform_defaults.yaml")

BUILTIN_DEFINITIONS: Tuple[ComponentDefinition, ...] = (
    COMPUTE_DEFINITIONS + DATA_DEFINITIONS + NETWORK_DEFINITIONS
)


def default_registry() -> SchemaRegistry:
    """Registry novo, populado com os tipos built-in."""
    return SchemaRegistry.of(BUILTIN_DEFINITIONS)


def builtin_platform_defaults(local_path: Optional[Union[str, Path]] = None) -> PlatformDefaults:
    """Defaults de plataforma embarcados, com override local opcional."""
    return load_platform_defaults(
        defaults_path=str(PLATFORM_DEFAULTS_PATH),
        local_path=str(local_path) if local_path is not None else None,
    )
