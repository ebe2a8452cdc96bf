# tests/core/config/test_hashing.py
"""
Testes do hashing canônico de configuração resolvida.

Os testes asseguram que:
- configurações equivalentes produzem o mesmo hash, independente da ordem
  das chaves
- alterações produzem hashes diferentes
- o algoritmo corresponde ao SHA-256 do JSON canônico
"""

import hashlib
import json

import pytest

try:
    from svc_manifest.core.config.hashing import canonical_json, compute_config_hash
except Exception as e:  # noqa: BLE001
    compute_config_hash = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _canonical_json_bytes(obj: dict) -> bytes:
    s = json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing hashing module. Implement:\n"
            "- src/svc_manifest/core/config/hashing.py (compute_config_hash)\n"
            "Policy expected: SHA-256 of canonical JSON serialization.\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_hash_is_deterministic():
    """
    Verifica que o hash é determinístico e independente da ordem das chaves.
    """
    _require_imports()
    h1 = compute_config_hash({"ttl": 300, "recordType": "A"})
    h2 = compute_config_hash({"recordType": "A", "ttl": 300})
    assert h1 == h2
    assert isinstance(h1, str)
    assert len(h1) == 64


def test_hash_matches_sha256_of_canonical_json():
    _require_imports()
    cfg = {"logging": {"retentionInDays": 30}, "placementStrategies": [{"type": "spread"}]}
    expected = hashlib.sha256(_canonical_json_bytes(cfg)).hexdigest()
    assert compute_config_hash(cfg) == expected
    assert canonical_json(cfg).encode("utf-8") == _canonical_json_bytes(cfg)


def test_hash_changes_on_override():
    _require_imports()
    assert compute_config_hash({"ttl": 300}) != compute_config_hash({"ttl": 600})


def test_hash_distinguishes_list_order():
    _require_imports()
    assert compute_config_hash({"values": ["a", "b"]}) != compute_config_hash({"values": ["b", "a"]})


def test_hash_rejects_non_dict():
    _require_imports()
    with pytest.raises(TypeError):
        compute_config_hash(["not", "a", "dict"])


def test_short_hash_is_prefix():
    _require_imports()
    from svc_manifest.core.config.hashing import short_hash

    full = compute_config_hash({"ttl": 300})
    assert short_hash(full) == full[:12]
