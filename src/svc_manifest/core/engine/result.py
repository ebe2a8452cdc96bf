# src/svc_manifest/core/engine/result.py
"""
Tipos de resultado do ValidationOrchestrator.

Componentes:
    - PipelineStatus → enum de estados finais (SUCCESS, FAILED, TIMED_OUT)
    - PipelineResult → estrutura imutável com manifest, warnings, erros e
      exit code observado pelo CLI externo

Falhas esperadas de validação são valores de retorno (status + errors), não
exceções: o chamador distingue "fatal, pare" de "sucesso com warnings" sem
depender de stack unwinding. `raise_for_status()` existe para quem prefere
o estilo com exceções.

Exit codes:
    - 0 → sucesso
    - 2 → erro de parse, schema, resolução ou referência
    - 4 → deadline do chamador expirou
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import ErrorPayload
from ..manifest.model import Manifest


EXIT_SUCCESS = 0
EXIT_ERROR = 2
EXIT_TIMED_OUT = 4


class PipelineStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


_EXIT_CODES = {
    PipelineStatus.SUCCESS: EXIT_SUCCESS,
    PipelineStatus.FAILED: EXIT_ERROR,
    PipelineStatus.TIMED_OUT: EXIT_TIMED_OUT,
}


def exit_code_for(status: PipelineStatus) -> int:
    return _EXIT_CODES[status]


@dataclass(frozen=True)
class PipelineResult:
    """
    Resultado de uma invocação de `validate` ou `plan`.

    Campos:
    - status: estado final
    - stage: último estágio executado (o que falhou, em caso de erro)
    - manifest: manifest validado (`validate`) ou resolvido (`plan`)
    - warnings: warnings acumulados, na ordem dos estágios
    - errors: payloads serializáveis (vazio em caso de sucesso)
    - run_id / events: rastreabilidade da invocação
    """

    status: PipelineStatus
    stage: str
    manifest: Optional[Manifest] = None
    warnings: List[str] = field(default_factory=list)
    errors: List[ErrorPayload] = field(default_factory=list)
    run_id: Optional[str] = None
    events: List[Dict[str, Any]] = field(default_factory=list, repr=False)
    exception: Optional[BaseException] = field(default=None, repr=False, compare=False)

    @property
    def exit_code(self) -> int:
        return exit_code_for(self.status)

    @property
    def ok(self) -> bool:
        return self.status == PipelineStatus.SUCCESS

    def raise_for_status(self) -> None:
        """Relança a exceção tipada original, quando houver falha."""
        if self.exception is not None:
            raise self.exception

    def to_dict(self) -> Dict[str, Any]:
        """Contrato produzido para o colaborador de provisionamento."""
        return {
            "resolvedManifest": self.manifest.to_dict() if self.manifest is not None else None,
            "warnings": list(self.warnings),
        }
