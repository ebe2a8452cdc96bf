# src/svc_manifest/core/engine/report.py
"""
Renderização textual de um PipelineResult.

O CLI externo exibe a lista completa e ordenada de erros e warnings, com
field paths, para que o autor corrija todos os problemas em um único ciclo
editar/revalidar.
"""

from __future__ import annotations

from typing import List

from ..errors import ErrorPayload
from .result import PipelineResult, PipelineStatus


def _error_lines(error: ErrorPayload) -> List[str]:
    header = error.message.splitlines()[0] if error.message else error.type
    lines = [f"[{error.type}] {header}"]

    violations = error.details.get("violations") or []
    for v in violations:
        line = f"  - {v.get('path')}: {v.get('message')}"
        if v.get("allowed"):
            line += f" (allowed: {', '.join(map(str, v['allowed']))})"
        lines.append(line)

    if not violations:
        for extra in error.message.splitlines()[1:]:
            lines.append(extra)

    if error.hint:
        lines.append(f"  hint: {error.hint}")
    return lines


def render_report(result: PipelineResult) -> str:
    lines: List[str] = []

    if result.status == PipelineStatus.SUCCESS:
        service = getattr(result.manifest, "service", None)
        lines.append(f"OK: {service} ({result.stage})")
    elif result.status == PipelineStatus.TIMED_OUT:
        lines.append(f"TIMED OUT during stage '{result.stage}'")
    else:
        lines.append(f"FAILED during stage '{result.stage}'")

    if result.errors:
        lines.append("")
        lines.append(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            lines.extend(_error_lines(error))

    if result.warnings:
        lines.append("")
        lines.append(f"Warnings ({len(result.warnings)}):")
        lines.extend(f"  - {w}" for w in result.warnings)

    return "\n".join(lines)
