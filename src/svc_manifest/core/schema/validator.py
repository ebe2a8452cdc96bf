# src/svc_manifest/core/schema/validator.py
"""
SchemaValidator — validação exaustiva por passada.

Este módulo valida:
    - passada 1: o documento do manifest contra o schema mestre, mais as
      verificações estruturais (`service`/`owner` obrigatórios, unicidade
      de `components[].name`)
    - passada 2: a configuração resolvida de um componente contra o schema
      do seu tipo (invocada pelo ConfigResolver)

Diferente do ManifestParser, este estágio **não é fail-fast**: todas as
violações encontradas em uma passada são acumuladas em uma lista ordenada,
cada uma com field path (`components[2].config.port`), mensagem e valor.

Decisões arquiteturais:
    - Validação via `jsonschema` (Draft 7, `iter_errors`)
    - Validators compilados são memoizados por tipo de componente; o cache é
      protegido por lock na escrita e seguro para leitura concorrente
    - A ordem das violações é determinística (posição no documento, regra)
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from jsonschema import Draft7Validator

from ..errors import Violation
from ..exceptions import MissingRequiredFieldError, SchemaValidationError
from ..manifest.model import Manifest
from .master import REQUIRED_TOP_LEVEL_FIELDS, compose_master_schema
from .registry import SchemaRegistry


def format_path(parts: Iterable[Any], prefix: str = "") -> str:
    """Formata um caminho (`['components', 2, 'config']`) como `components[2].config`."""
    out = prefix
    for part in parts:
        if isinstance(part, int):
            out += f"[{part}]"
        elif out:
            out += f".{part}"
        else:
            out = str(part)
    return out or "<root>"


def _sort_key(parts: Sequence[Any]) -> List[Tuple[int, int, str]]:
    return [(0, p, "") if isinstance(p, int) else (1, 0, str(p)) for p in parts]


def summarize(violations: Sequence[Violation], limit: int = 20) -> str:
    lines = [f"  - {v}" for v in violations[:limit]]
    if len(violations) > limit:
        lines.append(f"  ... and {len(violations) - limit} more")
    return "\n".join(lines)


def _collect(
    validator: Draft7Validator,
    instance: Any,
    *,
    prefix: str = "",
    component: Optional[str] = None,
) -> List[Violation]:
    errors = sorted(
        validator.iter_errors(instance),
        key=lambda e: (_sort_key(list(e.absolute_path)), str(e.validator), e.message),
    )

    violations: List[Violation] = []
    seen_required = set()
    for error in errors:
        parts = list(error.absolute_path)

        if error.validator == "required" and isinstance(error.instance, Mapping):
            for prop in error.validator_value:
                if prop in error.instance:
                    continue
                path = format_path(parts + [prop], prefix)
                if path in seen_required:
                    continue
                seen_required.add(path)
                violations.append(
                    Violation(
                        path=path,
                        message=f"'{prop}' is a required property",
                        rule="required",
                        component=component,
                    )
                )
            continue

        allowed = None
        if error.validator == "enum" and isinstance(error.validator_value, list):
            allowed = list(error.validator_value)

        violations.append(
            Violation(
                path=format_path(parts, prefix),
                message=error.message,
                rule=str(error.validator),
                value=error.instance,
                component=component,
                allowed=allowed,
            )
        )
    return violations


class SchemaValidator:
    """Validador de manifest (passada 1) e de configuração resolvida (passada 2)."""

    def __init__(self, registry: SchemaRegistry):
        self._registry = registry
        self._master = Draft7Validator(compose_master_schema())
        self._cache: Dict[str, Draft7Validator] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Cache de validators por tipo
    # ------------------------------------------------------------------
    def validator_for(self, component_type: str, *, component: Any = None) -> Draft7Validator:
        cached = self._cache.get(component_type)
        if cached is not None:
            return cached

        definition = self._registry.require(component_type, component=component)
        with self._lock:
            cached = self._cache.get(component_type)
            if cached is None:
                Draft7Validator.check_schema(definition.schema)
                cached = Draft7Validator(definition.schema)
                self._cache[component_type] = cached
        return cached

    # ------------------------------------------------------------------
    # Passada 1: manifest
    # ------------------------------------------------------------------
    def check_manifest(self, document: Union[Manifest, Mapping[str, Any]]) -> List[Violation]:
        data = document.to_dict() if isinstance(document, Manifest) else document

        violations: List[Violation] = []
        for field_name in REQUIRED_TOP_LEVEL_FIELDS:
            if data.get(field_name) is None:
                violations.append(
                    Violation(
                        path=field_name,
                        message=f"Missing required field: {field_name}",
                        rule="required",
                    )
                )

        violations.extend(_collect(self._master, data))
        violations.extend(self._check_unique_names(data.get("components")))
        return violations

    def _check_unique_names(self, components: Any) -> List[Violation]:
        if not isinstance(components, list):
            return []

        first_seen: Dict[str, int] = {}
        violations: List[Violation] = []
        for i, component in enumerate(components):
            if not isinstance(component, Mapping):
                continue
            name = component.get("name")
            if not isinstance(name, str):
                continue
            if name in first_seen:
                violations.append(
                    Violation(
                        path=f"components[{i}].name",
                        message=(
                            f"Duplicate component name '{name}' "
                            f"(first declared at components[{first_seen[name]}])"
                        ),
                        rule="unique",
                        value=name,
                        component=name,
                    )
                )
            else:
                first_seen[name] = i
        return violations

    def validate_manifest(self, document: Union[Manifest, Mapping[str, Any]]) -> None:
        violations = self.check_manifest(document)
        if not violations:
            return

        missing = [
            v.path for v in violations
            if v.rule == "required" and v.path in REQUIRED_TOP_LEVEL_FIELDS
        ]
        if missing:
            raise MissingRequiredFieldError(
                f"Missing required field(s): {', '.join(missing)}\n{summarize(violations)}",
                details={"fields": missing},
                hint="Declare `service` e `owner` no topo do manifest.",
                violations=tuple(violations),
            )

        raise SchemaValidationError(
            f"Manifest schema validation failed with {len(violations)} violation(s):\n"
            f"{summarize(violations)}",
            details={"component": None},
            hint="Corrija todos os campos listados e reexecute a validação.",
            violations=tuple(violations),
        )

    # ------------------------------------------------------------------
    # Passada 2: configuração resolvida de um componente
    # ------------------------------------------------------------------
    def check_component(
        self,
        component_type: str,
        config: Mapping[str, Any],
        *,
        index: Optional[int] = None,
        name: Optional[str] = None,
    ) -> List[Violation]:
        validator = self.validator_for(component_type, component=name)
        prefix = f"components[{index}].config" if index is not None else "config"
        return _collect(validator, config, prefix=prefix, component=name)

    def validate_component(
        self,
        component_type: str,
        config: Mapping[str, Any],
        *,
        index: Optional[int] = None,
        name: Optional[str] = None,
    ) -> None:
        violations = self.check_component(component_type, config, index=index, name=name)
        if not violations:
            return

        raise SchemaValidationError(
            f"Component '{name}' ({component_type}) failed schema validation "
            f"with {len(violations)} violation(s):\n{summarize(violations)}",
            details={"component": name, "component_type": component_type, "index": index},
            hint="Ajuste a configuração do componente no manifest ou os defaults de plataforma.",
            violations=tuple(violations),
        )
