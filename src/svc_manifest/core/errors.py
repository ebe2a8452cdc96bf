"""
svc-manifest — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do pipeline de resolução de
manifests. Erros são artefatos do contrato operacional do sistema e devem ser:

- explícitos
- serializáveis
- acionáveis (sempre com field path quando existir)

O CLI externo consome estes payloads para exibir a lista completa de erros
em um único ciclo editar/revalidar.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do pipeline.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
      (ex.: `violations` com field paths)
    - hint: ação sugerida ao autor do manifest
    - stage: estágio do pipeline onde a falha ocorreu
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    stage: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


@dataclass(frozen=True)
class Violation:
    """
    Uma violação individual encontrada durante uma passada de validação.

    Campos:
    - path: field path no estilo `components[2].config.port`
    - message: mensagem humana
    - rule: regra violada (`type`, `required`, `enum`, `unique`, ...)
    - value: valor ofensivo (quando existir)
    - severity: `error` ou `warning`
    - component: nome do componente, quando a violação é escopada a um
    - allowed: valores permitidos (violações de enum)
    """

    path: str
    message: str
    rule: str = "unknown"
    value: Any = None
    severity: str = "error"
    component: Optional[str] = None
    allowed: Optional[List[Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Parsing / estrutura
MANIFEST_PARSE_ERROR = "MANIFEST_PARSE_ERROR"
MANIFEST_NOT_FOUND = "MANIFEST_NOT_FOUND"
MANIFEST_MISSING_REQUIRED_FIELD = "MANIFEST_MISSING_REQUIRED_FIELD"

# Schema
SCHEMA_VALIDATION_FAILED = "SCHEMA_VALIDATION_FAILED"

# Resolução
UNKNOWN_COMPONENT_TYPE = "UNKNOWN_COMPONENT_TYPE"

# Referências / governança
BINDING_REFERENCE_INVALID = "BINDING_REFERENCE_INVALID"
GOVERNANCE_SUPPRESSION_INVALID = "GOVERNANCE_SUPPRESSION_INVALID"

# Defaults de plataforma
PLATFORM_DEFAULTS_NOT_FOUND = "PLATFORM_DEFAULTS_NOT_FOUND"
PLATFORM_DEFAULTS_INVALID = "PLATFORM_DEFAULTS_INVALID"

# Orquestração
PIPELINE_TIMED_OUT = "PIPELINE_TIMED_OUT"
PIPELINE_EXECUTION_ERROR = "PIPELINE_EXECUTION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def pipeline_execution_error(
    *,
    exc_type: str,
    exc_message: str,
    stage: Optional[str] = None,
    hint: str = "Falha inesperada. Nenhum fallback é aplicado automaticamente.",
) -> ErrorPayload:
    return ErrorPayload(
        type=PIPELINE_EXECUTION_ERROR,
        message="Unexpected failure while processing the manifest",
        details={"exc_type": exc_type, "exc_message": exc_message},
        hint=hint,
        stage=stage,
    )
