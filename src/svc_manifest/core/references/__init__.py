"""svc-manifest — References (core)."""

from .validator import (  # noqa: F401
    REQUIRED_SUPPRESSION_FIELDS,
    ReferenceValidator,
    is_calendar_date,
)
