# src/svc_manifest/core/hydration/hydrator.py
"""
ContextHydrator — seleção de ambiente e interpolação do manifest.

Este módulo transforma um manifest validado em um manifest hidratado para
um ambiente alvo. A hidratação é aplicada sobre uma cópia profunda: o
manifest recebido nunca é mutado, o que mantém `plan` idempotente entre
chamadas repetidas no mesmo processo.

Passos (nesta ordem):
    1. `complianceFramework` assume `commercial` quando ausente
    2. `defaults = environments[<ambiente>].defaults`; sem a entrada do
       ambiente alvo a interpolação é pulada e o manifest segue intacto
    3. Percorre todos os valores, exceto o bloco raiz `environments`:
        - string contendo `${envIs:NOME}` → o valor inteiro vira booleano
          (`ambiente == NOME`)
        - cada `${env:CHAVE}` → `defaults[CHAVE]` renderizado como texto;
          chaves desconhecidas permanecem literais
        - mapa que contém o ambiente alvo como chave → substituído pelo
          sub-valor daquele ambiente (override por ambiente)

Invariantes:
    - Tokens não resolvidos nunca são erro; viram warnings
    - A saída depende apenas de (manifest, ambiente)

Limites explícitos:
    - Não resolve `$ref`
    - Não consulta o SchemaRegistry
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from ..context import ResolutionContext
from ..manifest.model import DEFAULT_COMPLIANCE_FRAMEWORK, Manifest


ENV_TOKEN = re.compile(r"\$\{env:([^}]+)\}")
ENV_IS_TOKEN = re.compile(r"\$\{envIs:([^}]+)\}")

UNRESOLVED_WARNING_PREFIX = "Unresolved environment variables: "


@dataclass(frozen=True)
class HydrationResult:
    manifest: Manifest
    warnings: List[str] = field(default_factory=list)


def render_value(value: Any) -> str:
    """Renderiza um default de ambiente como texto para interpolação.

    Segue a forma como o YAML/JSON imprimiria o valor: `true`/`false`,
    `null` e inteiros sem ponto decimal.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join(render_value(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


class ContextHydrator:
    """Hidratação de manifests para um ambiente alvo."""

    def hydrate(self, manifest: Manifest, environment: str) -> HydrationResult:
        document = manifest.to_dict()
        if not document.get("complianceFramework"):
            document["complianceFramework"] = DEFAULT_COMPLIANCE_FRAMEWORK

        if not _declares_environment(manifest, environment):
            return HydrationResult(manifest=Manifest.from_dict(document))

        defaults = manifest.environment_defaults(environment)

        body = {k: v for k, v in document.items() if k != "environments"}
        hydrated: Dict[str, Any] = self._walk(body, defaults, environment)

        warnings: List[str] = []
        unresolved = _unresolved_tokens(hydrated)
        if "environments" in document:
            hydrated["environments"] = document["environments"]
        if unresolved:
            warnings.append(UNRESOLVED_WARNING_PREFIX + ", ".join(unresolved))

        return HydrationResult(manifest=Manifest.from_dict(hydrated), warnings=warnings)

    # -----------------------------
    # Percurso
    # -----------------------------
    def _walk(self, value: Any, defaults: Mapping[str, Any], environment: str) -> Any:
        if isinstance(value, str):
            return self._interpolate(value, defaults, environment)

        if isinstance(value, list):
            return [self._walk(item, defaults, environment) for item in value]

        if isinstance(value, dict):
            out: Dict[str, Any] = {}
            for key, child in value.items():
                if isinstance(child, dict) and environment in child:
                    out[key] = child[environment]
                else:
                    out[key] = self._walk(child, defaults, environment)
            return out

        return value

    @staticmethod
    def _interpolate(value: str, defaults: Mapping[str, Any], environment: str) -> Any:
        env_is = ENV_IS_TOKEN.search(value)
        if env_is is not None:
            return environment == env_is.group(1)

        def _substitute(match: "re.Match[str]") -> str:
            key = match.group(1)
            if key in defaults:
                return render_value(defaults[key])
            return match.group(0)

        return ENV_TOKEN.sub(_substitute, value)


def _declares_environment(manifest: Manifest, environment: str) -> bool:
    environments = manifest.environments
    return isinstance(environments, dict) and environments.get(environment) is not None


def _unresolved_tokens(value: Any) -> List[str]:
    found: List[str] = []

    def _scan(node: Any) -> None:
        if isinstance(node, str):
            for match in ENV_TOKEN.finditer(node):
                if match.group(0) not in found:
                    found.append(match.group(0))
        elif isinstance(node, list):
            for item in node:
                _scan(item)
        elif isinstance(node, dict):
            for child in node.values():
                _scan(child)

    _scan(value)
    return found


def build_resolution_context(manifest: Manifest, environment: str) -> ResolutionContext:
    """Constrói o contexto explícito de resolução a partir do manifest hidratado."""
    tags = manifest.tags if isinstance(manifest.tags, dict) else {}
    return ResolutionContext(
        service=manifest.service,
        environment=environment,
        compliance_framework=manifest.compliance_framework or DEFAULT_COMPLIANCE_FRAMEWORK,
        region=manifest.region,
        account_id=manifest.account_id,
        tags={str(k): str(v) for k, v in tags.items()},
    )
