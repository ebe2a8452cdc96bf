# src/svc_manifest/core/references/validator.py
"""
ReferenceValidator — consistência interna do manifest hidratado.

Este estágio roda depois da hidratação e da resolução, quando todos os nomes
de componente já são conhecidos. Ele não muta nada: é uma verificação pura
que retorna a lista (possivelmente vazia) de violações.

Verificações (todas coletadas, nenhuma fail-fast):
    - `binds[].to` aponta para um componente declarado
    - o grafo de binds não contém ciclos
    - cada supressão de governança (`governance.cdkNag.suppress[]`) carrega
      `id`, `justification`, `owner` e `expiresOn`
    - `expiresOn` é uma data de calendário válida
    - `appliesTo[].component` aponta para um componente declarado

Decisões arquiteturais:
    - Detecção de ciclo por ordenação topológica determinística (Kahn)
    - Quando há violações de bind e de governança, a exceção levantada é de
      bind (`BindingReferenceError`), mas carrega todas as violações
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Set

from ..errors import Violation
from ..exceptions import BindingReferenceError, GovernanceSuppressionError
from ..manifest.model import Binding, ComponentSpec, Manifest
from ..schema.validator import summarize


REQUIRED_SUPPRESSION_FIELDS = ("id", "justification", "owner", "expiresOn")

BINDING_RULES = ("reference", "cycle")

SUPPRESS_PATH = "governance.cdkNag.suppress"


def is_calendar_date(value: Any) -> bool:
    """`expiresOn` aceita datas YAML nativas ou strings ISO-8601."""
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        date.fromisoformat(value)
        return True
    except ValueError:
        pass
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
        return True
    except ValueError:
        return False


class ReferenceValidator:
    """Validação de referências de bind e metadados de governança."""

    def check(self, manifest: Manifest) -> List[Violation]:
        violations: List[Violation] = []
        violations.extend(self._check_binds(manifest))
        violations.extend(self._check_cycles(manifest))
        violations.extend(self._check_suppressions(manifest))
        return violations

    def validate(self, manifest: Manifest) -> None:
        violations = self.check(manifest)
        if not violations:
            return

        binding = [v for v in violations if v.rule in BINDING_RULES]
        if binding:
            raise BindingReferenceError(
                f"Invalid component reference(s) ({len(binding)}):\n{summarize(binding)}",
                details={"references": [v.value for v in binding]},
                hint="Declare o componente referenciado ou corrija `binds[].to`.",
                violations=tuple(violations),
            )

        raise GovernanceSuppressionError(
            f"Invalid governance suppression(s) ({len(violations)}):\n{summarize(violations)}",
            details={"count": len(violations)},
            hint="Cada supressão precisa de id, justification, owner e expiresOn (YYYY-MM-DD).",
            violations=tuple(violations),
        )

    # -----------------------------
    # Binds
    # -----------------------------
    def _check_binds(self, manifest: Manifest) -> List[Violation]:
        names = set(manifest.component_names())
        violations: List[Violation] = []

        for i, component in enumerate(manifest.components or []):
            binds = getattr(component, "binds", None)
            if not isinstance(binds, list):
                continue
            for j, bind in enumerate(binds):
                if not isinstance(bind, Binding):
                    continue
                if isinstance(bind.to, str):
                    if bind.to in names:
                        continue
                    message = (
                        f"Reference to non-existent component '{bind.to}' "
                        f"in components[{i}].binds[{j}]"
                    )
                else:
                    # `${envIs:}` hidratado vira booleano e nunca nomeia um componente
                    message = (
                        f"Bind target must be a component name, got "
                        f"{type(bind.to).__name__} {bind.to!r} in components[{i}].binds[{j}]"
                    )
                violations.append(
                    Violation(
                        path=f"components[{i}].binds[{j}].to",
                        message=message,
                        rule="reference",
                        value=bind.to,
                        component=component.name,
                    )
                )
        return violations

    def _check_cycles(self, manifest: Manifest) -> List[Violation]:
        specs = manifest.component_specs()
        index_of: Dict[str, int] = {}
        for i, spec in enumerate(manifest.components or []):
            if isinstance(spec, ComponentSpec) and isinstance(spec.name, str):
                index_of.setdefault(spec.name, i)

        # aresta: componente -> alvo do bind (alvos existentes apenas)
        targets: Dict[str, Set[str]] = {name: set() for name in index_of}
        for spec in specs:
            if spec.name not in targets or not isinstance(spec.binds, list):
                continue
            for bind in spec.binds:
                if isinstance(bind, Binding) and bind.to in targets:
                    targets[spec.name].add(bind.to)

        remaining = _prune_acyclic(targets)
        if not remaining:
            return []

        members = sorted(remaining, key=lambda n: index_of[n])
        first = members[0]
        return [
            Violation(
                path=f"components[{index_of[first]}].binds",
                message=f"Detected circular bind dependency among components: {', '.join(members)}",
                rule="cycle",
                value=members,
                component=first,
            )
        ]

    # -----------------------------
    # Governança
    # -----------------------------
    def _check_suppressions(self, manifest: Manifest) -> List[Violation]:
        entries = manifest.suppressions()
        if not isinstance(entries, list):
            return []

        names = set(manifest.component_names())
        violations: List[Violation] = []

        for k, entry in enumerate(entries):
            base = f"{SUPPRESS_PATH}[{k}]"
            if not isinstance(entry, Mapping):
                violations.append(
                    Violation(path=base, message=f"{base} must be an object", rule="type", value=entry)
                )
                continue

            for field_name in REQUIRED_SUPPRESSION_FIELDS:
                value = entry.get(field_name)
                if value is None or (isinstance(value, str) and not value.strip()):
                    violations.append(
                        Violation(
                            path=f"{base}.{field_name}",
                            message=f"Missing required field '{field_name}' in {base}",
                            rule="required",
                        )
                    )

            expires_on = entry.get("expiresOn")
            if expires_on is not None and not (isinstance(expires_on, str) and not expires_on.strip()):
                if not is_calendar_date(expires_on):
                    violations.append(
                        Violation(
                            path=f"{base}.expiresOn",
                            message=f"Invalid expiresOn date '{expires_on}' in {base}",
                            rule="date",
                            value=expires_on,
                        )
                    )

            applies_to = entry.get("appliesTo")
            if isinstance(applies_to, list):
                for m, target in enumerate(applies_to):
                    if not isinstance(target, Mapping):
                        continue
                    component = target.get("component")
                    if isinstance(component, str) and component not in names:
                        violations.append(
                            Violation(
                                path=f"{base}.appliesTo[{m}].component",
                                message=f"Suppression {base} applies to non-existent component '{component}'",
                                rule="applies-to",
                                value=component,
                            )
                        )

        return violations


def _prune_acyclic(targets: Dict[str, Set[str]]) -> Set[str]:
    """Remove repetidamente nós sem entrada ou sem saída (Kahn nos dois sentidos).

    O que sobra são exatamente os componentes que participam de ciclos (ou
    ficam entre dois ciclos).
    """
    alive: Set[str] = set(targets)

    while alive:
        incoming: Dict[str, int] = {n: 0 for n in alive}
        for n in alive:
            for t in targets[n] & alive:
                incoming[t] += 1

        dropped = {n for n in alive if incoming[n] == 0 or not (targets[n] & alive)}
        if not dropped:
            break
        alive -= dropped

    return alive
