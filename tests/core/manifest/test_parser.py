# tests/core/manifest/test_parser.py
"""
Testes do ManifestParser.

O parser é fail-fast e verifica apenas o shape mínimo do documento: ele
não consulta o SchemaRegistry nem valida a configuração dos componentes.
"""

from pathlib import Path

import pytest

from svc_manifest.core.exceptions import ManifestNotFoundError, ParseError
from svc_manifest.core.manifest.model import Binding, ComponentSpec, EnvironmentDefaults, Manifest
from svc_manifest.core.manifest.parser import EMPTY_COMPONENTS_MESSAGE, parse_manifest, read_manifest


def test_parse_minimal_manifest(minimal_manifest_yaml):
    manifest = parse_manifest(minimal_manifest_yaml)

    assert isinstance(manifest, Manifest)
    assert manifest.service == "orders-api"
    assert manifest.owner == "team-orders"
    assert manifest.compliance_framework is None
    assert manifest.component_names() == ["api"]
    assert isinstance(manifest.components[0], ComponentSpec)
    assert manifest.components[0].config == {"handler": "app.handler"}


def test_parse_full_manifest_shapes():
    text = """\
service: checkout
owner: team-checkout
complianceFramework: fedramp-moderate
region: us-east-1
accountId: "123456789012"
runtime: python
tags:
  cost-center: "42"
environments:
  dev:
    defaults:
      REGION: us-west-2
components:
  - name: api
    type: lambda-api
    binds:
      - to: db
        capability: db:postgres
        access: read
        env:
          host: DB_HOST
  - name: db
    type: rds-postgres
"""
    manifest = parse_manifest(text)

    assert manifest.compliance_framework == "fedramp-moderate"
    assert manifest.account_id == "123456789012"
    assert manifest.extras == {"runtime": "python"}
    assert isinstance(manifest.environments["dev"], EnvironmentDefaults)
    assert manifest.environment_defaults("dev") == {"REGION": "us-west-2"}
    assert manifest.environment_defaults("prod") == {}

    bind = manifest.components[0].binds[0]
    assert isinstance(bind, Binding)
    assert (bind.to, bind.capability, bind.access) == ("db", "db:postgres", "read")
    assert bind.env == {"host": "DB_HOST"}
    assert manifest.components[1].config == {}


def test_parse_accepts_json_documents():
    manifest = parse_manifest('{"service": "svc", "components": [{"name": "q", "type": "sqs-queue"}]}')
    assert manifest.component_names() == ["q"]


def test_to_dict_round_trips_wire_names():
    text = """\
service: checkout
owner: team-checkout
complianceFramework: commercial
accountId: "1"
components:
  - name: api
    type: lambda-api
    config: {memorySize: 512}
"""
    manifest = parse_manifest(text)
    data = manifest.to_dict()

    assert data["complianceFramework"] == "commercial"
    assert data["accountId"] == "1"
    assert "binds" not in data["components"][0]
    assert Manifest.from_dict(data) == manifest


@pytest.mark.parametrize(
    "text, match",
    [
        ("service: [unclosed", "Invalid YAML syntax"),
        ("", "empty"),
        ("- just\n- a list\n", "mapping"),
        ("owner: x\ncomponents: [{name: a, type: vpc}]\n", "service"),
        ("service: 42\ncomponents: [{name: a, type: vpc}]\n", "service"),
        ("service: svc\n", "components"),
        ("service: svc\ncomponents: {name: a}\n", "components"),
    ],
)
def test_parse_rejects_bad_shapes(text, match):
    with pytest.raises(ParseError, match=match):
        parse_manifest(text)


def test_parse_rejects_empty_components():
    with pytest.raises(ParseError) as exc:
        parse_manifest("service: svc\nowner: me\ncomponents: []\n")
    assert str(exc.value) == EMPTY_COMPONENTS_MESSAGE
    assert EMPTY_COMPONENTS_MESSAGE == "Manifest must declare at least one component."


def test_yaml_error_carries_position():
    with pytest.raises(ParseError) as exc:
        parse_manifest("service: svc: extra\n")
    assert "line" in exc.value.details


def test_parser_does_not_consult_registry():
    manifest = parse_manifest("service: svc\ncomponents:\n  - name: a\n    type: not-a-real-type\n")
    assert manifest.components[0].type == "not-a-real-type"


def test_read_manifest(tmp_path: Path, minimal_manifest_yaml):
    path = tmp_path / "service.yml"
    path.write_text(minimal_manifest_yaml, encoding="utf-8")
    assert read_manifest(path) == minimal_manifest_yaml


def test_read_manifest_missing_file(tmp_path: Path):
    with pytest.raises(ManifestNotFoundError) as exc:
        read_manifest(tmp_path / "missing.yml")
    assert isinstance(exc.value, ParseError)
    assert exc.value.to_payload().type == "MANIFEST_NOT_FOUND"
