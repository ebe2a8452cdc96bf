# tests/conftest.py
"""
Fixtures compartilhados para testes do svc-manifest.

Este módulo define fixtures reutilizáveis que fornecem:
- registry com os componentes built-in
- defaults de plataforma reduzidos e determinísticos
- orquestrador pronto para `validate`/`plan`
- manifests mínimos em YAML inline

Decisões arquiteturais:
    - Manifests são strings YAML inline (sem filesystem)
    - Defaults de plataforma de teste são explícitos, não os embarcados,
      para que cada camada de precedência seja observável
    - Testes que precisam de arquivo usam `tmp_path`

Invariantes:
    - Nenhuma fixture lê variáveis de ambiente
    - Nenhuma fixture compartilha estado mutável entre testes
"""

from __future__ import annotations

import pytest

from svc_manifest.components import default_registry
from svc_manifest.core.config.platform import PlatformDefaults
from svc_manifest.core.context import ResolutionContext
from svc_manifest.core.engine.orchestrator import ValidationOrchestrator
from svc_manifest.core.schema.validator import SchemaValidator


MINIMAL_MANIFEST = """\
service: orders-api
owner: team-orders
components:
  - name: api
    type: lambda-api
    config:
      handler: app.handler
"""


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def platform_defaults() -> PlatformDefaults:
    """Defaults de plataforma mínimos usados pelos cenários de precedência."""
    return PlatformDefaults.from_dict(
        {
            "platform": {
                "route53-record": {"recordType": "A"},
            },
            "environments": {
                "dev": {"route53-record": {"ttl": 600}},
                "prod": {"route53-record": {"ttl": 3600}},
            },
            "compliance": {
                "fedramp-high": {"cloudwatch-log-group": {"retentionInDays": 3653}},
            },
        }
    )


@pytest.fixture
def schema_validator(registry) -> SchemaValidator:
    return SchemaValidator(registry)


@pytest.fixture
def orchestrator(registry, platform_defaults) -> ValidationOrchestrator:
    return ValidationOrchestrator(registry, platform_defaults)


@pytest.fixture
def minimal_manifest_yaml() -> str:
    return MINIMAL_MANIFEST


@pytest.fixture
def dev_context() -> ResolutionContext:
    return ResolutionContext(service="orders-api", environment="dev")
