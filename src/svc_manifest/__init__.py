# src/svc_manifest/__init__.py
"""
svc-manifest — pipeline de resolução de manifests de serviço.

Transforma uma descrição declarativa de serviço (componentes nomeados e
tipados, ambiente alvo e postura de compliance) em uma árvore de
configuração totalmente resolvida e válida contra o schema de cada tipo,
pronta para uma camada de provisionamento downstream.

Arquitetura em alto nível:
    - core        → estágios do pipeline (parse, schema, hydrate, resolve,
                    references) e o orquestrador
    - components  → catálogo estático de tipos de componente built-in

Limites explícitos:
    - Não sintetiza nem implanta infraestrutura
    - Não compara com estado já implantado
    - Não manipula segredos
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .components import builtin_platform_defaults, default_registry
from .core.engine import PipelineResult, PipelineStatus, ValidationOrchestrator, render_report


def default_orchestrator(
    *,
    local_defaults_path: Optional[Union[str, Path]] = None,
    max_workers: Optional[int] = None,
) -> ValidationOrchestrator:
    """Orquestrador com os componentes e defaults de plataforma built-in."""
    return ValidationOrchestrator(
        default_registry(),
        builtin_platform_defaults(local_defaults_path),
        max_workers=max_workers,
    )


__all__ = [
    "PipelineResult",
    "PipelineStatus",
    "ValidationOrchestrator",
    "builtin_platform_defaults",
    "default_orchestrator",
    "default_registry",
    "render_report",
]
