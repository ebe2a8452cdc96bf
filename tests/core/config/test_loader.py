# tests/core/config/test_loader.py
"""
Testes do carregador de defaults de plataforma (load_platform_defaults).

Os testes asseguram que:
- o arquivo de defaults é obrigatório
- o arquivo local é opcional e, quando presente, tem prioridade
- formatos não suportados são rejeitados
- raízes e seções com shape inválido são detectadas precocemente

Invariantes:
    - Nenhuma configuração parcial é retornada em caso de erro
    - Overrides locais nunca silenciam erros de defaults ausentes
"""

import json
from pathlib import Path

import pytest

try:
    from svc_manifest.core.config.errors import (
        DefaultsNotFoundError,
        InvalidConfigRootTypeError,
        UnsupportedConfigFormatError,
    )
    from svc_manifest.core.config.loader import load_platform_defaults
except Exception as e:  # noqa: BLE001
    load_platform_defaults = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


DEFAULTS_YAML = """\
platform:
  route53-record:
    recordType: A
environments:
  dev:
    vpc:
      natGateways: 1
  prod:
    vpc:
      natGateways: 2
compliance:
  fedramp-high:
    cloudwatch-log-group:
      retentionInDays: 3653
"""

LOCAL_YAML = """\
environments:
  prod:
    vpc:
      natGateways: 3
"""


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing loader/errors modules. Implement:\n"
            "- src/svc_manifest/core/config/loader.py (load_platform_defaults)\n"
            "- src/svc_manifest/core/config/errors.py (typed exceptions)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_missing_defaults_raises(tmp_path: Path):
    """
    Verifica que a ausência do arquivo de defaults é erro fatal.

    Invariantes:
        - A exceção utilizada é específica (`DefaultsNotFoundError`)
        - Nenhuma configuração parcial é retornada
    """
    _require_imports()
    with pytest.raises(DefaultsNotFoundError):
        load_platform_defaults(defaults_path=str(tmp_path / "defaults.yaml"))


def test_load_defaults_only(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(DEFAULTS_YAML, encoding="utf-8")

    out = load_platform_defaults(defaults_path=str(defaults))

    assert out.platform_layer("route53-record") == {"recordType": "A"}
    assert out.environment_layer("prod", "vpc") == {"natGateways": 2}
    assert out.compliance_layer("fedramp-high", "cloudwatch-log-group") == {"retentionInDays": 3653}


def test_missing_local_is_ok(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(DEFAULTS_YAML, encoding="utf-8")

    out = load_platform_defaults(defaults_path=str(defaults), local_path=str(tmp_path / "local.yaml"))
    assert out.environment_layer("prod", "vpc") == {"natGateways": 2}


def test_load_defaults_and_local(tmp_path: Path):
    """
    Verifica o deep-merge entre defaults e override local.

    - valores sobrescritos pelo arquivo local
    - valores preservados do defaults quando não sobrescritos
    """
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yml"
    defaults.write_text(DEFAULTS_YAML, encoding="utf-8")
    local.write_text(LOCAL_YAML, encoding="utf-8")

    out = load_platform_defaults(defaults_path=str(defaults), local_path=str(local))

    assert out.environment_layer("prod", "vpc") == {"natGateways": 3}
    assert out.environment_layer("dev", "vpc") == {"natGateways": 1}
    assert out.platform_layer("route53-record") == {"recordType": "A"}


def test_json_defaults_are_supported(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.json"
    defaults.write_text(json.dumps({"platform": {"vpc": {"maxAzs": 3}}}), encoding="utf-8")

    out = load_platform_defaults(defaults_path=str(defaults))
    assert out.platform_layer("vpc") == {"maxAzs": 3}
    assert out.environment_layer("dev", "vpc") == {}


def test_empty_defaults_file_is_empty_config(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("", encoding="utf-8")

    out = load_platform_defaults(defaults_path=str(defaults))
    assert out.to_dict() == {"platform": {}, "environments": {}, "compliance": {}}


def test_unsupported_format_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.toml"
    defaults.write_text("platform = {}", encoding="utf-8")
    with pytest.raises(UnsupportedConfigFormatError):
        load_platform_defaults(defaults_path=str(defaults))


def test_non_mapping_root_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(InvalidConfigRootTypeError):
        load_platform_defaults(defaults_path=str(defaults))


def test_unknown_section_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("regions:\n  us-east-1: {}\n", encoding="utf-8")
    with pytest.raises(InvalidConfigRootTypeError, match="regions"):
        load_platform_defaults(defaults_path=str(defaults))


def test_layers_are_copies(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(DEFAULTS_YAML, encoding="utf-8")
    out = load_platform_defaults(defaults_path=str(defaults))

    layer = out.environment_layer("prod", "vpc")
    layer["natGateways"] = 99
    assert out.environment_layer("prod", "vpc") == {"natGateways": 2}


def test_config_errors_map_to_payloads(tmp_path: Path):
    _require_imports()
    with pytest.raises(DefaultsNotFoundError) as exc:
        load_platform_defaults(defaults_path=str(tmp_path / "missing.yaml"))
    payload = exc.value.to_payload()
    assert payload.type == "PLATFORM_DEFAULTS_NOT_FOUND"
    assert payload.details["path"].endswith("missing.yaml")
