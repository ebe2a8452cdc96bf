"""
Defaults de plataforma — camadas 2, 3 e 4 da precedência.

Estrutura canônica (YAML/JSON):

    platform:                 # camada 2: política da organização
      <component-type>: {...}
    environments:             # camada 3: por nome de ambiente
      <environment>:
        <component-type>: {...}
    compliance:               # camada 4: por framework de compliance
      <framework>:
        <component-type>: {...}

Decisões arquiteturais:
    - A seleção de ambiente e de framework é por igualdade exata de chave
    - Cada acessor retorna uma cópia: camadas nunca são mutadas pelo resolver
    - Ausência de entrada é uma camada vazia, nunca um erro
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from .errors import InvalidConfigRootTypeError


PLATFORM_SECTIONS = ("platform", "environments", "compliance")


@dataclass(frozen=True)
class PlatformDefaults:
    """Fontes externas das camadas de plataforma, ambiente e compliance."""

    platform: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    environments: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)
    compliance: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlatformDefaults":
        if not isinstance(data, Mapping):
            raise InvalidConfigRootTypeError(
                f"Platform defaults root must be a mapping, got: {type(data).__name__}"
            )

        unknown = sorted(set(data) - set(PLATFORM_SECTIONS))
        if unknown:
            raise InvalidConfigRootTypeError(
                f"Unknown platform defaults section(s): {', '.join(map(str, unknown))}"
            )

        sections: Dict[str, Any] = {}
        for name in PLATFORM_SECTIONS:
            section = data.get(name) or {}
            if not isinstance(section, Mapping):
                raise InvalidConfigRootTypeError(
                    f"Platform defaults section '{name}' must be a mapping"
                )
            sections[name] = deepcopy(dict(section))

        return cls(**sections)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platform": deepcopy(self.platform),
            "environments": deepcopy(self.environments),
            "compliance": deepcopy(self.compliance),
        }

    # -----------------------------
    # Camadas
    # -----------------------------
    def platform_layer(self, component_type: str) -> Dict[str, Any]:
        return deepcopy(self.platform.get(component_type) or {})

    def environment_layer(self, environment: str, component_type: str) -> Dict[str, Any]:
        scoped = self.environments.get(environment) or {}
        return deepcopy(scoped.get(component_type) or {})

    def compliance_layer(self, framework: str, component_type: str) -> Dict[str, Any]:
        scoped = self.compliance.get(framework) or {}
        return deepcopy(scoped.get(component_type) or {})
