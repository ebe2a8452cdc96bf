# src/svc_manifest/core/resolver/resolver.py
"""
ConfigResolver — motor de precedência de configuração.

Para cada ComponentSpec, o resolver produz uma configuração resolvida
combinando cinco camadas, da menor para a maior prioridade:

    1. fallback     → default hardcoded do tipo (SchemaRegistry)
    2. platform     → política da organização
    3. environment  → defaults do ambiente ativo
    4. compliance   → defaults do framework de compliance (match exato)
    5. spec         → `ComponentSpec.config` do manifest (sempre vence)

Depois do merge (política única de `core.config.merge`), aplica a
normalização específica do tipo e revalida o resultado contra o schema do
tipo (passada 2 do SchemaValidator).

Invariantes:
    - Entradas idênticas produzem configuração byte-idêntica
    - Nenhum relógio, aleatoriedade ou I/O durante a resolução
    - O resolver é sem estado por componente: pode ser chamado em paralelo

Limites explícitos:
    - Não valida referências entre componentes (ver ReferenceValidator)
    - Não conhece o pipeline; recebe apenas spec + ResolutionContext
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from ..config.hashing import compute_config_hash
from ..config.merge import merge_layers
from ..config.platform import PlatformDefaults
from ..context import ResolutionContext
from ..errors import Violation
from ..exceptions import SchemaValidationError
from ..manifest.model import ComponentSpec
from ..schema.registry import ComponentDefinition, SchemaRegistry
from ..schema.validator import SchemaValidator


LAYER_NAMES = ("fallback", "platform", "environment", "compliance", "spec")


@dataclass(frozen=True)
class ResolvedComponent:
    """Configuração final de um componente, com hash canônico e warnings."""

    name: str
    type: str
    config: Dict[str, Any]
    config_hash: str
    warnings: List[str] = field(default_factory=list)


class ConfigResolver:
    def __init__(
        self,
        registry: SchemaRegistry,
        platform_defaults: PlatformDefaults,
        schema_validator: SchemaValidator,
    ):
        self._registry = registry
        self._platform_defaults = platform_defaults
        self._schema_validator = schema_validator

    def layers(
        self,
        spec: ComponentSpec,
        ctx: ResolutionContext,
        *,
        index: int = 0,
    ) -> List[Tuple[str, Dict[str, Any]]]:
        """As cinco camadas nomeadas, da menor para a maior prioridade."""
        definition = self._registry.require(spec.type, component=spec.name)
        return self._layers(definition, spec, ctx, index)

    def _layers(
        self,
        definition: ComponentDefinition,
        spec: ComponentSpec,
        ctx: ResolutionContext,
        index: int,
    ) -> List[Tuple[str, Dict[str, Any]]]:
        if not isinstance(spec.config, Mapping):
            raise SchemaValidationError(
                f"Component '{spec.name}' config must be a mapping after hydration",
                details={"component": spec.name, "component_type": spec.type, "index": index},
                violations=(
                    Violation(
                        path=f"components[{index}].config",
                        message="config must be an object",
                        rule="type",
                        value=spec.config,
                        component=spec.name,
                    ),
                ),
            )

        defaults = self._platform_defaults
        return [
            ("fallback", definition.hardcoded_fallbacks()),
            ("platform", defaults.platform_layer(definition.type)),
            ("environment", defaults.environment_layer(ctx.environment, definition.type)),
            ("compliance", defaults.compliance_layer(ctx.compliance_framework, definition.type)),
            ("spec", deepcopy(dict(spec.config))),
        ]

    def resolve(self, spec: ComponentSpec, ctx: ResolutionContext, index: int = 0) -> ResolvedComponent:
        """
        Resolve a configuração final de um componente.

        Raises:
            UnknownComponentTypeError: tipo sem entrada no registry.
            SchemaValidationError: configuração normalizada inválida para o tipo
                (escopada ao componente).
        """
        definition = self._registry.require(spec.type, component=spec.name)

        merged = merge_layers(layer for _, layer in self._layers(definition, spec, ctx, index))
        config, warnings = definition.normalize(merged, ctx)

        self._schema_validator.validate_component(
            definition.type, config, index=index, name=spec.name
        )

        return ResolvedComponent(
            name=spec.name,
            type=definition.type,
            config=config,
            config_hash=compute_config_hash(config),
            warnings=list(warnings),
        )

    def explain(self, spec: ComponentSpec, ctx: ResolutionContext) -> Dict[str, Dict[str, Any]]:
        """Mapa ordenado camada → dados, para depuração de precedência."""
        return dict(self.layers(spec, ctx))
