"""
Contextos explícitos do pipeline de resolução.

Este módulo define os dois únicos valores de contexto que atravessam o
pipeline. Nenhum estágio lê estado global ou variáveis de ambiente do
processo: tudo que é transversal (ambiente alvo, framework de compliance,
região, conta) chega por parâmetro.

Componentes:
    - ResolutionContext → valor imutável, compartilhado em leitura por todas
      as resoluções de componente (seguro entre threads)
    - PipelineContext   → contexto de uma invocação: eventos estruturados e
      warnings agrupados por estágio

Invariantes:
    - Cada invocação de `validate`/`plan` possui seu próprio PipelineContext
    - Eventos incluem sempre `run_id` e `stage`
    - Warnings nunca abortam o pipeline
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class ResolutionContext:
    """
    Contexto imutável de resolução de um manifest hidratado.

    Substitui o uso de variáveis globais de processo para selecionar
    ambiente/credenciais: é construído uma vez após a hidratação e passado
    explicitamente a cada ConfigResolver.
    """

    service: str
    environment: str
    compliance_framework: str = "commercial"
    region: Optional[str] = None
    account_id: Optional[str] = None
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))


@dataclass
class PipelineContext:
    """
    Contexto de uma invocação do pipeline (`validate` ou `plan`).

    Campos canônicos:
    - run_id: identificador da invocação
    - created_at: timestamp UTC de criação
    - environment: ambiente alvo (None em `validate`)
    - events: log estruturado de eventos
    - warnings: warnings por estágio, na ordem em que foram emitidos
    """

    run_id: str
    created_at: datetime
    environment: Optional[str] = None

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, stage: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "stage": stage,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, stage: str, message: str) -> None:
        if stage not in self.warnings:
            self.warnings[stage] = []
        self.warnings[stage].append(message)

    def all_warnings(self) -> List[str]:
        """Warnings achatados, na ordem dos estágios."""
        out: List[str] = []
        for messages in self.warnings.values():
            out.extend(messages)
        return out
