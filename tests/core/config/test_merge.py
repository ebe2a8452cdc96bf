# tests/core/config/test_merge.py
"""
Testes da política de merge em camadas.

Os testes asseguram que:
- valores escalares são sobrescritos
- dicionários são mesclados de forma recursiva
- listas são substituídas integralmente (nunca concatenadas)
- `UNSET` é ausência e `None` é um valor real
- objetos de entrada não são mutados durante o merge

Limites explícitos:
    - Não valida carregamento de arquivos
    - Não valida o ConfigResolver (ver tests/core/resolver)
"""

import pytest

try:
    from svc_manifest.core.config.merge import UNSET, deep_merge, merge_layers, prune_unset
except Exception as e:  # noqa: BLE001
    deep_merge = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing config merge module. Implement:\n"
            "- src/svc_manifest/core/config/merge.py (UNSET, deep_merge, merge_layers, prune_unset)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_merge_simple_override():
    """
    Verifica o override básico de escalares, sem mutar as entradas.
    """
    _require_imports()
    base = {"a": 1, "b": 2}
    override = {"b": 99}
    out = deep_merge(base, override)
    assert out == {"a": 1, "b": 99}
    assert base == {"a": 1, "b": 2}
    assert override == {"b": 99}


def test_merge_nested_dict():
    _require_imports()
    base = {"logging": {"retentionInDays": 30, "streamPrefix": "service"}}
    override = {"logging": {"retentionInDays": 90}}
    out = deep_merge(base, override)
    assert out == {"logging": {"retentionInDays": 90, "streamPrefix": "service"}}


def test_merge_list_override_total():
    """
    Verifica que listas são substituídas por inteiro.

    Invariantes:
        - A lista resultante é exatamente a lista da camada superior
        - Nenhum elemento da camada inferior é preservado
    """
    _require_imports()
    base = {"placementStrategies": ["A"]}
    override = {"placementStrategies": ["B", "C"]}
    out = deep_merge(base, override)
    assert out == {"placementStrategies": ["B", "C"]}


def test_merge_empty_list_is_a_real_value():
    _require_imports()
    out = deep_merge({"values": ["a", "b"]}, {"values": []})
    assert out == {"values": []}


def test_merge_unset_is_absence_and_none_overrides():
    _require_imports()
    base = {"ttl": 300, "zone": "example.com"}
    out = deep_merge(base, {"ttl": UNSET, "zone": None})
    assert out == {"ttl": 300, "zone": None}


def test_merge_type_change_replaces_outright():
    _require_imports()
    assert deep_merge({"image": {"tag": "1.0"}}, {"image": "nginx"}) == {"image": "nginx"}
    assert deep_merge({"image": "nginx"}, {"image": {"tag": "1.0"}}) == {"image": {"tag": "1.0"}}


def test_merge_does_not_alias_nested_values():
    _require_imports()
    override = {"tags": {"team": "a"}}
    out = deep_merge({}, override)
    out["tags"]["team"] = "b"
    assert override == {"tags": {"team": "a"}}


def test_merge_rejects_non_mapping_roots():
    _require_imports()
    with pytest.raises(TypeError):
        deep_merge({"a": 1}, ["a"])


def test_merge_layers_lowest_to_highest_priority():
    _require_imports()
    layers = [
        {"ttl": 300, "recordType": "CNAME"},
        {"recordType": "A"},
        {"ttl": 600},
        {},
        {"values": ["10.0.0.1"], "ttl": UNSET},
    ]
    assert merge_layers(layers) == {"ttl": 600, "recordType": "A", "values": ["10.0.0.1"]}


def test_prune_unset_removes_sentinels_at_any_depth():
    _require_imports()
    value = {"a": UNSET, "b": {"c": UNSET, "d": 1}, "e": [1, UNSET, 2]}
    assert prune_unset(value) == {"b": {"d": 1}, "e": [1, 2]}


def test_unset_is_singleton_and_falsy():
    _require_imports()
    from copy import deepcopy

    assert deepcopy(UNSET) is UNSET
    assert not UNSET
    assert repr(UNSET) == "UNSET"
