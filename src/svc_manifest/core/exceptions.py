"""
svc-manifest — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do pipeline de resolução.

Objetivo:
- Permitir que os estágios levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para ErrorPayload
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Estágios são fail-fast entre si, mas cada estágio coleta internamente
  todas as violações antes de levantar (ver `violations`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Tuple

from . import errors as codes
from .errors import ErrorPayload, Violation


@dataclass(frozen=True)
class ManifestException(Exception):
    """Base class para exceções do pipeline.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    code: ClassVar[str] = codes.PIPELINE_EXECUTION_ERROR

    def __str__(self) -> str:
        return self.message

    def to_payload(self, *, stage: Optional[str] = None) -> ErrorPayload:
        return ErrorPayload(
            type=self.code,
            message=self.message,
            details=dict(self.details),
            hint=self.hint,
            stage=stage,
        )


@dataclass(frozen=True)
class _CollectedViolations(ManifestException):
    """Exceção que carrega a lista completa e ordenada de violações."""

    violations: Tuple[Violation, ...] = ()

    def to_payload(self, *, stage: Optional[str] = None) -> ErrorPayload:
        payload = super().to_payload(stage=stage)
        details = dict(payload.details)
        details["violations"] = [v.to_dict() for v in self.violations]
        return ErrorPayload(
            type=payload.type,
            message=payload.message,
            details=details,
            hint=payload.hint,
            stage=stage,
        )


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParseError(ManifestException):
    """Documento malformado ou com shape raiz incorreto."""

    code: ClassVar[str] = codes.MANIFEST_PARSE_ERROR


@dataclass(frozen=True)
class ManifestNotFoundError(ParseError):
    """Arquivo de manifest inexistente."""

    code: ClassVar[str] = codes.MANIFEST_NOT_FOUND


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SchemaValidationError(_CollectedViolations):
    """Uma ou mais violações de schema (coletadas, não fail-fast)."""

    code: ClassVar[str] = codes.SCHEMA_VALIDATION_FAILED


@dataclass(frozen=True)
class MissingRequiredFieldError(SchemaValidationError):
    """Campos estruturais de topo (`service`/`owner`) ausentes."""

    code: ClassVar[str] = codes.MANIFEST_MISSING_REQUIRED_FIELD


# ---------------------------------------------------------------------------
# Resolução
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnknownComponentTypeError(ManifestException):
    """Tipo de componente sem entrada no SchemaRegistry (fatal)."""

    code: ClassVar[str] = codes.UNKNOWN_COMPONENT_TYPE


@dataclass(frozen=True)
class DuplicateComponentTypeError(ManifestException):
    """Tentativa de registrar duas definições para o mesmo tipo."""

    code: ClassVar[str] = codes.PIPELINE_EXECUTION_ERROR


# ---------------------------------------------------------------------------
# Referências / governança
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReferenceValidationError(_CollectedViolations):
    """Base das falhas de consistência interna detectadas após a hidratação."""

    code: ClassVar[str] = codes.BINDING_REFERENCE_INVALID


@dataclass(frozen=True)
class BindingReferenceError(ReferenceValidationError):
    """`binds[].to` não resolve para um componente declarado (ou forma ciclo)."""

    code: ClassVar[str] = codes.BINDING_REFERENCE_INVALID


@dataclass(frozen=True)
class GovernanceSuppressionError(ReferenceValidationError):
    """Entrada de supressão de governança malformada."""

    code: ClassVar[str] = codes.GOVERNANCE_SUPPRESSION_INVALID


# ---------------------------------------------------------------------------
# Orquestração
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlanTimeoutError(ManifestException):
    """Deadline fornecido pelo chamador expirou antes do fim do `plan`."""

    code: ClassVar[str] = codes.PIPELINE_TIMED_OUT
