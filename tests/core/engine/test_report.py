# tests/core/engine/test_report.py
"""Testes da renderização textual de PipelineResult."""

from svc_manifest.core.engine.report import render_report
from svc_manifest.core.engine.result import PipelineResult, PipelineStatus
from svc_manifest.core.errors import ErrorPayload


def test_report_success_with_warnings(orchestrator):
    text = """\
service: orders-api
owner: team-orders
components:
  - name: logs
    type: cloudwatch-log-group
    config:
      retentionInDays: 45
"""
    report = render_report(orchestrator.plan(text, "dev"))
    lines = report.splitlines()

    assert lines[0] == "OK: orders-api (references)"
    assert "Warnings (1):" in lines
    assert lines[-1].startswith("  - logs: requested log retention unsupported")


def test_report_lists_every_violation_with_allowed_values(orchestrator):
    text = """\
service: svc
owner: me
complianceFramework: fedramp-low
components:
  - name: api
    type: lambda-api
  - name: api
    type: lambda-api
"""
    report = render_report(orchestrator.validate(text))

    assert report.splitlines()[0] == "FAILED during stage 'schema'"
    assert "Errors (1):" in report
    assert "[SCHEMA_VALIDATION_FAILED] Manifest schema validation failed with 2 violation(s):" in report
    assert "  - complianceFramework: " in report
    assert "(allowed: commercial, fedramp-moderate, fedramp-high)" in report
    assert "  - components[1].name: Duplicate component name 'api'" in report
    assert "  hint: " in report


def test_report_timed_out_header():
    result = PipelineResult(
        status=PipelineStatus.TIMED_OUT,
        stage="resolve",
        errors=[
            ErrorPayload(
                type="PIPELINE_TIMED_OUT",
                message="Plan timed out after 1.0s",
                details={"timeout_seconds": 1.0},
            )
        ],
    )
    report = render_report(result)

    assert report.splitlines()[0] == "TIMED OUT during stage 'resolve'"
    assert "[PIPELINE_TIMED_OUT] Plan timed out after 1.0s" in report
    assert "hint" not in report


def test_report_without_violations_keeps_message_body():
    result = PipelineResult(
        status=PipelineStatus.FAILED,
        stage="parse",
        errors=[ErrorPayload(type="MANIFEST_PARSE_ERROR", message="first\nsecond", details={})],
    )
    assert render_report(result).splitlines()[-2:] == ["[MANIFEST_PARSE_ERROR] first", "second"]
