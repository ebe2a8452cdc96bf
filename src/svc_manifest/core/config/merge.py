"""
Utilitário canônico de merge em camadas.

Este módulo implementa a política oficial de merge utilizada pelo
ConfigResolver para combinar as cinco camadas de precedência de um
componente. Nenhum builder de componente implementa merge próprio: cada um
fornece apenas os dados das camadas.

Representação de valores:
    Os valores são a união JSON nativa do Python
    (None | bool | int | float | str | list | dict), acrescida do sentinela
    `UNSET`, que representa "não fornecido". Camadas lidas de YAML/JSON
    nunca contêm o sentinela (ausência ali é a chave faltando); ele existe
    para camadas montadas em código, como `hardcoded_fallbacks` de um
    ComponentDefinition ou camadas extras passadas a `merge_layers`, que
    precisam declarar uma chave sem fornecer valor.

Política de merge (v1):
    - dict + dict → merge recursivo por chave
    - UNSET       → ausência: nunca sobrescreve a camada inferior
    - None        → valor real: sobrescreve
    - list        → sobrescrita total (sem concatenação, sem merge por índice)
    - escalar     → sobrescrita direta
    - dict sobre escalar (ou o inverso) → sobrescrita direta

Invariantes:
    - Nenhum input é mutado
    - A mesma entrada sempre produz a mesma saída
    - Chaves ausentes na camada superior são herdadas sem alteração
"""

from copy import deepcopy
from typing import Any, Dict, Iterable, Mapping, Union


class _Unset:
    """Sentinela de valor não fornecido."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __deepcopy__(self, memo):
        return self

    def __copy__(self):
        return self


UNSET = _Unset()

Value = Union[None, bool, int, float, str, list, dict, _Unset]


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre duas camadas de configuração.

    Decisões arquiteturais:
        - O merge é puramente funcional (inputs não são mutados)
        - Listas nunca são concatenadas: a camada superior substitui a lista
        - `UNSET` é tratado como ausência; `None` é um valor explícito.
          Só aparece em camadas construídas programaticamente; uma chave
          faltando tem o mesmo efeito

    Args:
        base: camada de menor prioridade.
        override: camada de maior prioridade.

    Returns:
        Dict[str, Any]: novo dicionário resultante.

    Raises:
        TypeError: se alguma das camadas não for um mapa.
    """
    if not isinstance(base, Mapping) or not isinstance(override, Mapping):
        raise TypeError(
            f"deep_merge requires mappings at the root, got: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = {k: deepcopy(v) for k, v in base.items()}

    for key, override_value in override.items():
        if override_value is UNSET:
            continue

        base_value = result.get(key, UNSET)

        # dict -> merge recursivo
        if isinstance(base_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(base_value, override_value)
            continue

        # list, escalar, None ou troca de tipo -> sobrescrita
        result[key] = deepcopy(override_value)

    return result


def merge_layers(layers: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    """Combina camadas da menor para a maior prioridade."""
    result: Dict[str, Any] = {}
    for layer in layers:
        result = deep_merge(result, layer or {})
    return prune_unset(result)


def prune_unset(value: Any) -> Any:
    """Remove sentinelas `UNSET` remanescentes (em qualquer profundidade)."""
    if isinstance(value, Mapping):
        return {k: prune_unset(v) for k, v in value.items() if v is not UNSET}
    if isinstance(value, list):
        return [prune_unset(v) for v in value if v is not UNSET]
    return value
