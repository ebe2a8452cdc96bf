# src/svc_manifest/core/schema/registry.py
"""
Registro estático de tipos de componente (SchemaRegistry).

Este módulo define o `SchemaRegistry`, a tabela explícita que mapeia o
identificador de tipo de um componente (`rds-postgres`, `lambda-api`, ...)
para a sua definição: schema JSON, fallbacks hardcoded e hook de
normalização.

Decisões arquiteturais:
    - Registro explícito em tempo de inicialização; nenhuma descoberta por
      introspecção ("construir uma instância e sondar métodos")
    - Tipos duplicados são erro fatal no momento do registro
    - A ordem de registro é preservada separadamente
    - Após a construção, o registry é lido concorrentemente sem locks

Invariantes:
    - Cada tipo possui exatamente uma definição
    - `lookup` nunca levanta: ausência é `None` (NotFound)

Limites explícitos:
    - Não valida configurações (ver SchemaValidator)
    - Não faz merge de camadas (ver ConfigResolver)
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..context import ResolutionContext
from ..exceptions import DuplicateComponentTypeError, UnknownComponentTypeError


Normalizer = Callable[[Dict[str, Any], ResolutionContext], Tuple[Dict[str, Any], List[str]]]


def identity_normalizer(config: Dict[str, Any], ctx: ResolutionContext) -> Tuple[Dict[str, Any], List[str]]:
    return config, []


@dataclass(frozen=True)
class ComponentDefinition:
    """
    Definição de um tipo de componente.

    Campos:
        - type: identificador do tipo (chave do registry)
        - schema: JSON Schema (draft 7) da configuração resolvida
        - fallbacks: camada 1, o default mais seguro e mínimo do tipo
        - normalize: normalização específica do tipo, aplicada após o merge;
          retorna a configuração normalizada e eventuais warnings
    """

    type: str
    schema: Dict[str, Any]
    fallbacks: Dict[str, Any] = field(default_factory=dict)
    normalize: Normalizer = identity_normalizer
    description: str = ""

    def hardcoded_fallbacks(self) -> Dict[str, Any]:
        return deepcopy(self.fallbacks)


@dataclass
class SchemaRegistry:
    """Registro canônico de definições de componente."""

    _definitions: Dict[str, ComponentDefinition] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def of(cls, definitions: Iterable[ComponentDefinition]) -> "SchemaRegistry":
        registry = cls()
        for definition in definitions:
            registry.register(definition)
        return registry

    def register(self, definition: ComponentDefinition) -> None:
        component_type = getattr(definition, "type", None)
        if not isinstance(component_type, str) or not component_type.strip():
            raise ValueError("component definition type must be a non-empty string")

        if component_type in self._definitions:
            raise DuplicateComponentTypeError(
                f"Duplicate component type: {component_type}",
                details={"component_type": component_type},
            )

        self._definitions[component_type] = definition
        self._order.append(component_type)

    def lookup(self, component_type: str) -> Optional[ComponentDefinition]:
        return self._definitions.get(component_type)

    def require(self, component_type: Any, *, component: Any = None) -> ComponentDefinition:
        definition = self._definitions.get(component_type) if isinstance(component_type, str) else None
        if definition is None:
            available = self.types()
            raise UnknownComponentTypeError(
                f"Unknown component type '{component_type}' for component '{component}'. "
                f"Available types: {', '.join(available)}",
                details={
                    "component": component,
                    "component_type": component_type,
                    "available": available,
                },
                hint="Use um dos tipos registrados ou registre o novo tipo no SchemaRegistry.",
            )
        return definition

    def types(self) -> List[str]:
        return list(self._order)

    def __contains__(self, component_type: object) -> bool:
        return component_type in self._definitions

    def __len__(self) -> int:
        return len(self._order)
