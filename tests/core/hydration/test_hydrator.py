# tests/core/hydration/test_hydrator.py
"""
Testes do ContextHydrator.

Cobre:
- interpolação `${env:CHAVE}` a partir de `environments.<env>.defaults`
- `${envIs:NOME}` → booleano
- override por ambiente (mapa com a chave do ambiente alvo)
- tokens não resolvidos → warning, nunca erro
- sem `environments.<env>` a interpolação é pulada
- o manifest de entrada nunca é mutado
"""

import pytest

from svc_manifest.core.context import ResolutionContext
from svc_manifest.core.hydration.hydrator import (
    UNRESOLVED_WARNING_PREFIX,
    ContextHydrator,
    build_resolution_context,
    render_value,
)
from svc_manifest.core.manifest.parser import parse_manifest


MANIFEST = """\
service: orders-api
owner: team-orders
environments:
  dev:
    defaults:
      REGION: us-west-2
      REPLICAS: 2
      DEBUG: true
  prod:
    defaults:
      REGION: us-east-1
components:
  - name: api
    type: lambda-api
    config:
      environment:
        ENDPOINT: "endpoint-${env:REGION}"
        REPLICAS: "${env:REPLICAS}"
        DEBUG: "${env:DEBUG}"
      monitoring:
        enabled: "${envIs:prod}"
      memorySize:
        dev: 256
        prod: 1024
"""


@pytest.fixture
def hydrator():
    return ContextHydrator()


def _config(result, index=0):
    return result.manifest.components[index].config


def test_env_token_interpolation(hydrator):
    result = hydrator.hydrate(parse_manifest(MANIFEST), "dev")

    env = _config(result)["environment"]
    assert env["ENDPOINT"] == "endpoint-us-west-2"
    assert env["REPLICAS"] == "2"
    assert env["DEBUG"] == "true"
    assert result.warnings == []


def test_env_is_token_becomes_boolean(hydrator):
    manifest = parse_manifest(MANIFEST)

    assert _config(hydrator.hydrate(manifest, "dev"))["monitoring"]["enabled"] is False
    assert _config(hydrator.hydrate(manifest, "prod"))["monitoring"]["enabled"] is True


def test_per_environment_map_is_unwrapped(hydrator):
    manifest = parse_manifest(MANIFEST)

    assert _config(hydrator.hydrate(manifest, "dev"))["memorySize"] == 256
    assert _config(hydrator.hydrate(manifest, "prod"))["memorySize"] == 1024


def test_map_without_target_environment_is_kept(hydrator):
    result = hydrator.hydrate(parse_manifest(MANIFEST), "staging")
    assert _config(result)["memorySize"] == {"dev": 256, "prod": 1024}


def test_top_level_values_are_hydrated(hydrator):
    text = """\
service: orders-api
owner: team-orders
environments:
  prod:
    defaults: {}
region:
  dev: us-west-2
  prod: us-east-1
components:
  - name: api
    type: lambda-api
"""
    result = hydrator.hydrate(parse_manifest(text), "prod")
    assert result.manifest.region == "us-east-1"


def test_manifest_without_target_environment_is_not_interpolated(hydrator):
    text = """\
service: orders-api
owner: team-orders
region:
  dev: us-west-2
  prod: us-east-1
components:
  - name: api
    type: lambda-api
    config:
      environment:
        FLAG: "${envIs:prod}"
        URL: "${env:HOST}"
"""
    result = hydrator.hydrate(parse_manifest(text), "dev")

    env = _config(result)["environment"]
    assert env == {"FLAG": "${envIs:prod}", "URL": "${env:HOST}"}
    assert result.manifest.region == {"dev": "us-west-2", "prod": "us-east-1"}
    assert result.manifest.compliance_framework == "commercial"
    assert result.warnings == []


def test_unresolved_tokens_become_single_warning(hydrator):
    text = """\
service: orders-api
owner: team-orders
environments:
  dev:
    defaults:
      KNOWN: x
components:
  - name: api
    type: lambda-api
    config:
      environment:
        A: "${env:MISSING}"
        B: "x-${env:MISSING}-${env:OTHER}"
"""
    result = hydrator.hydrate(parse_manifest(text), "dev")

    env = _config(result)["environment"]
    assert env["A"] == "${env:MISSING}"
    assert env["B"] == "x-${env:MISSING}-${env:OTHER}"
    assert result.warnings == [UNRESOLVED_WARNING_PREFIX + "${env:MISSING}, ${env:OTHER}"]


def test_environments_block_is_not_interpolated(hydrator):
    text = """\
service: orders-api
owner: team-orders
environments:
  dev:
    defaults:
      URL: "${env:HOST}"
components:
  - name: api
    type: lambda-api
"""
    result = hydrator.hydrate(parse_manifest(text), "dev")
    assert result.warnings == []
    assert result.manifest.environment_defaults("dev") == {"URL": "${env:HOST}"}


def test_compliance_framework_defaults_to_commercial(hydrator, minimal_manifest_yaml):
    manifest = parse_manifest(minimal_manifest_yaml)
    result = hydrator.hydrate(manifest, "dev")

    assert manifest.compliance_framework is None
    assert result.manifest.compliance_framework == "commercial"


def test_hydration_does_not_mutate_input(hydrator):
    manifest = parse_manifest(MANIFEST)
    before = manifest.to_dict()

    first = hydrator.hydrate(manifest, "dev")
    second = hydrator.hydrate(manifest, "dev")

    assert manifest.to_dict() == before
    assert first.manifest == second.manifest


@pytest.mark.parametrize(
    "value, expected",
    [
        (True, "true"),
        (False, "false"),
        (None, "null"),
        (3.0, "3"),
        (2.5, "2.5"),
        (10, "10"),
        (["a", 1], "a,1"),
        ({"b": 1, "a": 2}, '{"a": 2, "b": 1}'),
    ],
)
def test_render_value(value, expected):
    assert render_value(value) == expected


def test_build_resolution_context(hydrator):
    text = """\
service: orders-api
owner: team-orders
complianceFramework: fedramp-high
region: us-east-1
accountId: "123"
tags:
  team: orders
components:
  - name: api
    type: lambda-api
"""
    hydrated = hydrator.hydrate(parse_manifest(text), "prod").manifest
    ctx = build_resolution_context(hydrated, "prod")

    assert ctx == ResolutionContext(
        service="orders-api",
        environment="prod",
        compliance_framework="fedramp-high",
        region="us-east-1",
        account_id="123",
        tags={"team": "orders"},
    )
    with pytest.raises(TypeError):
        ctx.tags["team"] = "x"
