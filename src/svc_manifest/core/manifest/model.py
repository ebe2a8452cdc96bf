"""
Modelo de dados do manifest de serviço.

O manifest é criado do zero a partir do texto lido no início de cada
comando, nunca é persistido e deixa de existir ao fim da invocação.

Decisões arquiteturais:
    - `from_dict` é leniente: valores com tipo errado são preservados para
      que o SchemaValidator possa reportá-los com field path
    - Chaves desconhecidas são preservadas em `extras` (ex.: `runtime`)
    - `to_dict` usa os nomes do formato de arquivo (camelCase) e omite
      campos opcionais ausentes, garantindo round-trip
    - Nenhum método muta o objeto recebido
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class ComplianceFramework(str, Enum):
    """Postura de compliance do serviço (seleciona a camada 4)."""

    COMMERCIAL = "commercial"
    FEDRAMP_MODERATE = "fedramp-moderate"
    FEDRAMP_HIGH = "fedramp-high"


DEFAULT_COMPLIANCE_FRAMEWORK = ComplianceFramework.COMMERCIAL.value


def _copy_map(value: Any) -> Any:
    return deepcopy(value) if value is not None else None


def _extras(data: Mapping[str, Any], known: tuple) -> Dict[str, Any]:
    return {k: deepcopy(v) for k, v in data.items() if k not in known}


# ---------------------------------------------------------------------------
# Binding
# ---------------------------------------------------------------------------

_BINDING_KEYS = ("to", "capability", "access", "env")


@dataclass(frozen=True)
class Binding:
    """Dependência declarada de um componente para a capability de outro."""

    to: Any
    capability: Any = None
    access: Any = None
    env: Optional[Dict[str, Any]] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Binding":
        return cls(
            to=data.get("to"),
            capability=data.get("capability"),
            access=data.get("access"),
            env=_copy_map(data.get("env")),
            extras=_extras(data, _BINDING_KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.to is not None:
            out["to"] = self.to
        if self.capability is not None:
            out["capability"] = self.capability
        if self.access is not None:
            out["access"] = self.access
        if self.env is not None:
            out["env"] = deepcopy(self.env)
        out.update(deepcopy(self.extras))
        return out


# ---------------------------------------------------------------------------
# ComponentSpec
# ---------------------------------------------------------------------------

_COMPONENT_KEYS = ("name", "type", "config", "binds")


@dataclass(frozen=True)
class ComponentSpec:
    """Unidade nomeada e tipada de configuração dentro do manifest."""

    name: Any
    type: Any
    config: Any = field(default_factory=dict)
    binds: List[Any] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ComponentSpec":
        raw_binds = data.get("binds")
        if isinstance(raw_binds, list):
            binds = [Binding.from_dict(b) if isinstance(b, Mapping) else deepcopy(b) for b in raw_binds]
        else:
            binds = deepcopy(raw_binds) if raw_binds is not None else []

        config = data.get("config")
        return cls(
            name=data.get("name"),
            type=data.get("type"),
            config=deepcopy(config) if config is not None else {},
            binds=binds,
            extras=_extras(data, _COMPONENT_KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.name is not None:
            out["name"] = self.name
        if self.type is not None:
            out["type"] = self.type
        out["config"] = deepcopy(self.config)
        if isinstance(self.binds, list):
            if self.binds:
                out["binds"] = [b.to_dict() if isinstance(b, Binding) else deepcopy(b) for b in self.binds]
        else:
            out["binds"] = deepcopy(self.binds)
        out.update(deepcopy(self.extras))
        return out

    def with_config(self, config: Dict[str, Any]) -> "ComponentSpec":
        return replace(self, config=deepcopy(config))


# ---------------------------------------------------------------------------
# EnvironmentDefaults
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EnvironmentDefaults:
    """Defaults de um ambiente, consumidos apenas durante a hidratação."""

    name: str
    defaults: Any = field(default_factory=dict)
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "EnvironmentDefaults":
        defaults = data.get("defaults")
        return cls(
            name=name,
            defaults=deepcopy(defaults) if defaults is not None else {},
            extras=_extras(data, ("defaults",)),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"defaults": deepcopy(self.defaults)}
        out.update(deepcopy(self.extras))
        return out


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

_MANIFEST_FIELDS = (
    ("service", "service"),
    ("owner", "owner"),
    ("complianceFramework", "compliance_framework"),
    ("environment", "environment"),
    ("region", "region"),
    ("accountId", "account_id"),
)

_MANIFEST_KEYS = tuple(k for k, _ in _MANIFEST_FIELDS) + (
    "components",
    "tags",
    "labels",
    "environments",
    "governance",
)


@dataclass(frozen=True)
class Manifest:
    """Entidade raiz: descrição declarativa de um serviço e seus componentes."""

    service: Any
    owner: Any = None
    compliance_framework: Any = None
    environment: Any = None
    region: Any = None
    account_id: Any = None
    components: List[Any] = field(default_factory=list)
    tags: Any = None
    labels: Any = None
    environments: Any = None
    governance: Any = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Manifest":
        raw_components = data.get("components")
        if isinstance(raw_components, list):
            components = [
                ComponentSpec.from_dict(c) if isinstance(c, Mapping) else deepcopy(c)
                for c in raw_components
            ]
        else:
            components = deepcopy(raw_components)

        raw_envs = data.get("environments")
        if isinstance(raw_envs, Mapping):
            environments: Any = {
                name: EnvironmentDefaults.from_dict(name, env) if isinstance(env, Mapping) else deepcopy(env)
                for name, env in raw_envs.items()
            }
        else:
            environments = deepcopy(raw_envs)

        kwargs = {attr: deepcopy(data.get(key)) for key, attr in _MANIFEST_FIELDS}
        return cls(
            components=components,
            tags=_copy_map(data.get("tags")),
            labels=_copy_map(data.get("labels")),
            environments=environments,
            governance=_copy_map(data.get("governance")),
            extras=_extras(data, _MANIFEST_KEYS),
            **kwargs,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for key, attr in _MANIFEST_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                out[key] = deepcopy(value)

        if isinstance(self.components, list):
            out["components"] = [
                c.to_dict() if isinstance(c, ComponentSpec) else deepcopy(c)
                for c in self.components
            ]
        elif self.components is not None:
            out["components"] = deepcopy(self.components)

        for key in ("tags", "labels"):
            value = getattr(self, key)
            if value is not None:
                out[key] = deepcopy(value)

        if isinstance(self.environments, dict):
            out["environments"] = {
                name: env.to_dict() if isinstance(env, EnvironmentDefaults) else deepcopy(env)
                for name, env in self.environments.items()
            }
        elif self.environments is not None:
            out["environments"] = deepcopy(self.environments)

        if self.governance is not None:
            out["governance"] = deepcopy(self.governance)

        out.update(deepcopy(self.extras))
        return out

    # -----------------------------
    # Consultas
    # -----------------------------
    def component_specs(self) -> List[ComponentSpec]:
        if not isinstance(self.components, list):
            return []
        return [c for c in self.components if isinstance(c, ComponentSpec)]

    def component_names(self) -> List[Any]:
        return [c.name for c in self.component_specs()]

    def find_component(self, name: str) -> Optional[ComponentSpec]:
        for c in self.component_specs():
            if c.name == name:
                return c
        return None

    def environment_defaults(self, environment: str) -> Dict[str, Any]:
        """Defaults de `environments[environment]`; vazio quando ausente."""
        if not isinstance(self.environments, dict):
            return {}
        env = self.environments.get(environment)
        if not isinstance(env, EnvironmentDefaults) or not isinstance(env.defaults, dict):
            return {}
        return deepcopy(env.defaults)

    def suppressions(self) -> Any:
        """Lista bruta `governance.cdkNag.suppress` (None quando ausente)."""
        if not isinstance(self.governance, Mapping):
            return None
        cdk_nag = self.governance.get("cdkNag")
        if not isinstance(cdk_nag, Mapping):
            return None
        return cdk_nag.get("suppress")

    def with_components(self, components: List[ComponentSpec]) -> "Manifest":
        return replace(self, components=list(components))
