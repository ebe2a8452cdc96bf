# src/svc_manifest/core/engine/orchestrator.py
"""
ValidationOrchestrator — sequenciamento dos estágios do pipeline.

Entradas públicas:
    - validate(texto)           = parse → schema (→ tipos registrados)
    - plan(texto, ambiente)     = validate → hydrate → resolve → references

Decisões arquiteturais:
    - Estágios são fail-fast entre si: o primeiro erro fatal encerra a
      invocação e nenhum estágio posterior roda
    - Exceções tipadas são convertidas em ErrorPayload (serializável, sem
      stack trace); exceções inesperadas viram PIPELINE_EXECUTION_ERROR
    - A resolução por componente pode rodar em um pool de threads
      (`max_workers`); o join acontece antes do ReferenceValidator e a
      ordem de saída é sempre a ordem do manifest
    - O deadline do chamador envolve o `plan` inteiro; ao expirar o
      resultado é `timed_out`, nunca confundido com falha de validação

Limites explícitos:
    - Não faz parsing de argumentos de CLI
    - Não persiste a configuração resolvida
"""

from __future__ import annotations

import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..config.hashing import short_hash
from ..config.platform import PlatformDefaults
from ..context import PipelineContext, ResolutionContext
from ..errors import ErrorPayload, pipeline_execution_error
from ..exceptions import ManifestException, PlanTimeoutError
from ..hydration.hydrator import ContextHydrator, build_resolution_context
from ..manifest.model import ComponentSpec, Manifest
from ..manifest.parser import parse_manifest, read_manifest
from ..references.validator import ReferenceValidator
from ..resolver.resolver import ConfigResolver, ResolvedComponent
from ..schema.registry import SchemaRegistry
from ..schema.validator import SchemaValidator
from .result import PipelineResult, PipelineStatus


STAGE_READ = "read"
STAGE_PARSE = "parse"
STAGE_SCHEMA = "schema"
STAGE_HYDRATE = "hydrate"
STAGE_RESOLVE = "resolve"
STAGE_REFERENCES = "references"


class _Run:
    """Estado de uma invocação: contexto, estágio corrente e deadline."""

    def __init__(self, ctx: PipelineContext, deadline: Optional[float] = None):
        self.ctx = ctx
        self.stage = STAGE_PARSE
        self.deadline = deadline
        self.timeout: Optional[float] = None

    def enter(self, stage: str) -> None:
        self.check_deadline()
        self.stage = stage
        self.ctx.log(stage=stage, level="info", message="stage started")

    def check_deadline(self) -> None:
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise PlanTimeoutError(
                f"Plan timed out after {self.timeout}s",
                details={"timeout_seconds": self.timeout, "stage": self.stage},
            )


class ValidationOrchestrator:
    def __init__(
        self,
        registry: SchemaRegistry,
        platform_defaults: Optional[PlatformDefaults] = None,
        *,
        max_workers: Optional[int] = None,
    ):
        self.registry = registry
        self.platform_defaults = platform_defaults or PlatformDefaults()
        self.max_workers = max_workers

        self.schema_validator = SchemaValidator(registry)
        self.hydrator = ContextHydrator()
        self.resolver = ConfigResolver(registry, self.platform_defaults, self.schema_validator)
        self.reference_validator = ReferenceValidator()

    # ------------------------------------------------------------------
    # Entradas públicas
    # ------------------------------------------------------------------
    def validate(self, manifest_text: str) -> PipelineResult:
        run = _Run(self._new_context())
        try:
            manifest = self._validate(manifest_text, run)
        except Exception as e:
            return self._failure(run, e)
        return self._success(run, manifest)

    def plan(
        self,
        manifest_text: str,
        environment: str,
        *,
        timeout: Optional[float] = None,
    ) -> PipelineResult:
        """
        Executa parse → schema → hydrate → resolve → references.

        Com `timeout`, o pipeline roda em uma thread dedicada e o chamador
        recebe `timed_out` assim que o deadline expira. A thread não é
        interrompida: ela segue até o próximo `check_deadline` (entrada de
        estágio ou próximo componente) e ainda registra eventos no contexto
        da execução. O resultado devolvido carrega cópias de `events` e
        `warnings` tiradas no momento do timeout, e não muda depois disso.
        """
        if timeout is None:
            run = _Run(self._new_context(environment))
            return self._plan_guarded(manifest_text, environment, run)

        run = _Run(self._new_context(environment), deadline=time.monotonic() + timeout)
        run.timeout = timeout

        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(self._plan_guarded, manifest_text, environment, run)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            exc = PlanTimeoutError(
                f"Plan timed out after {timeout}s",
                details={"timeout_seconds": timeout, "stage": run.stage},
                hint="Aumente o deadline ou reduza o número de componentes por manifest.",
            )
            return self._failure(run, exc)
        finally:
            executor.shutdown(wait=False)

    def validate_file(self, path: Union[str, Path]) -> PipelineResult:
        run = _Run(self._new_context())
        run.stage = STAGE_READ
        try:
            text = read_manifest(path)
        except Exception as e:
            return self._failure(run, e)
        return self.validate(text)

    def plan_file(
        self,
        path: Union[str, Path],
        environment: str,
        *,
        timeout: Optional[float] = None,
    ) -> PipelineResult:
        run = _Run(self._new_context(environment))
        run.stage = STAGE_READ
        try:
            text = read_manifest(path)
        except Exception as e:
            return self._failure(run, e)
        return self.plan(text, environment, timeout=timeout)

    # ------------------------------------------------------------------
    # Estágios
    # ------------------------------------------------------------------
    def _validate(self, manifest_text: str, run: _Run) -> Manifest:
        run.enter(STAGE_PARSE)
        manifest = parse_manifest(manifest_text)

        run.enter(STAGE_SCHEMA)
        self.schema_validator.validate_manifest(manifest)
        for spec in manifest.component_specs():
            self.registry.require(spec.type, component=spec.name)

        run.ctx.log(
            stage=STAGE_SCHEMA,
            level="info",
            message="manifest validated",
            service=manifest.service,
            components=len(manifest.component_specs()),
        )
        return manifest

    def _plan_guarded(self, manifest_text: str, environment: str, run: _Run) -> PipelineResult:
        try:
            manifest = self._plan(manifest_text, environment, run)
        except Exception as e:
            return self._failure(run, e)
        return self._success(run, manifest)

    def _plan(self, manifest_text: str, environment: str, run: _Run) -> Manifest:
        manifest = self._validate(manifest_text, run)

        run.enter(STAGE_HYDRATE)
        hydration = self.hydrator.hydrate(manifest, environment)
        for message in hydration.warnings:
            run.ctx.add_warning(stage=STAGE_HYDRATE, message=message)
        hydrated = hydration.manifest

        run.enter(STAGE_RESOLVE)
        resolution_ctx = build_resolution_context(hydrated, environment)
        resolved = self._resolve_all(hydrated.component_specs(), resolution_ctx, run)
        for component in resolved:
            for message in component.warnings:
                run.ctx.add_warning(stage=STAGE_RESOLVE, message=f"{component.name}: {message}")

        resolved_manifest = hydrated.with_components(
            [spec.with_config(rc.config) for spec, rc in zip(hydrated.component_specs(), resolved)]
        )

        run.enter(STAGE_REFERENCES)
        self.reference_validator.validate(resolved_manifest)

        run.ctx.log(
            stage=STAGE_REFERENCES,
            level="info",
            message="plan completed",
            environment=environment,
            config_hashes={rc.name: short_hash(rc.config_hash) for rc in resolved},
        )
        return resolved_manifest

    def _resolve_all(
        self,
        specs: List[ComponentSpec],
        resolution_ctx: ResolutionContext,
        run: _Run,
    ) -> List[ResolvedComponent]:
        def _resolve(item: Tuple[int, ComponentSpec]) -> ResolvedComponent:
            run.check_deadline()
            index, spec = item
            return self.resolver.resolve(spec, resolution_ctx, index=index)

        items = list(enumerate(specs))
        if not self.max_workers or self.max_workers <= 1 or len(items) <= 1:
            return [_resolve(item) for item in items]

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(_resolve, items))

    # ------------------------------------------------------------------
    # Resultado
    # ------------------------------------------------------------------
    def _new_context(self, environment: Optional[str] = None) -> PipelineContext:
        return PipelineContext(
            run_id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
            environment=environment,
        )

    def _success(self, run: _Run, manifest: Manifest) -> PipelineResult:
        return PipelineResult(
            status=PipelineStatus.SUCCESS,
            stage=run.stage,
            manifest=manifest,
            warnings=run.ctx.all_warnings(),
            errors=[],
            run_id=run.ctx.run_id,
            events=list(run.ctx.events),
        )

    def _failure(self, run: _Run, exc: Exception) -> PipelineResult:
        error = self._exception_to_error(exc, stage=run.stage)
        status = PipelineStatus.TIMED_OUT if isinstance(exc, PlanTimeoutError) else PipelineStatus.FAILED

        run.ctx.log(stage=run.stage, level="error", message=error.message, error_type=error.type)
        return PipelineResult(
            status=status,
            stage=run.stage,
            manifest=None,
            warnings=run.ctx.all_warnings(),
            errors=[error],
            run_id=run.ctx.run_id,
            events=list(run.ctx.events),
            exception=exc,
        )

    @staticmethod
    def _exception_to_error(exc: Exception, *, stage: str) -> ErrorPayload:
        """Converte exceções em ErrorPayload (serializável, acionável).

        - ManifestException: já carrega message/details/hint
        - Outras exceções: PIPELINE_EXECUTION_ERROR, sem stack trace
        """
        if isinstance(exc, ManifestException):
            return exc.to_payload(stage=stage)

        return pipeline_execution_error(
            exc_type=exc.__class__.__name__,
            exc_message=str(exc),
            stage=stage,
        )
