"""svc-manifest — Hydration (core)."""

from .hydrator import (  # noqa: F401
    ContextHydrator,
    HydrationResult,
    build_resolution_context,
    render_value,
)
