"""svc-manifest — Engine (core)."""

from .orchestrator import ValidationOrchestrator  # noqa: F401
from .report import render_report  # noqa: F401
from .result import (  # noqa: F401
    EXIT_ERROR,
    EXIT_SUCCESS,
    EXIT_TIMED_OUT,
    PipelineResult,
    PipelineStatus,
)
