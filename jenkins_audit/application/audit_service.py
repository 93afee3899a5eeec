from __future__ import annotations

import logging
import time
from datetime import timedelta

from jenkins_audit.domain.entities import AuditRunResult
from jenkins_audit.domain.errors import FatalFetchError
from .config_export import ConfigExportService
from .derivations import STALE_AFTER, derive_findings
from .orchestrator import FetchOrchestrator

log = logging.getLogger(__name__)


class AuditApplicationService:
    """
    The top-level use case: fetch the job inventory, then either derive the
    audit findings or, in save mode, export every job's configuration.

    Receives all dependencies via constructor injection. A fatal fetch error
    becomes a failed AuditRunResult instead of an exception.
    """

    def __init__(self, orchestrator: FetchOrchestrator, exporter: ConfigExportService | None = None, stale_after: timedelta = STALE_AFTER) -> None:
        self._orchestrator = orchestrator
        self._exporter     = exporter
        self._stale_after  = stale_after

    async def execute(self, save_mode: bool = False) -> AuditRunResult:
        if save_mode and self._exporter is None:
            raise ValueError("save mode requires a ConfigExportService")

        started = time.monotonic()
        try:
            result = await self._orchestrator.collect()
        except FatalFetchError as exc:
            elapsed = time.monotonic() - started
            log.error("Audit failed: %s", exc, exc_info=True)
            return AuditRunResult(
                status        = "failed",
                elapsed_secs  = elapsed,
                error_message = str(exc),
            )

        if save_mode:
            saved = await self._exporter.export(result)
            return AuditRunResult(
                status        = "success",
                elapsed_secs  = time.monotonic() - started,
                saved_configs = saved,
                failed_jobs   = result.failed_jobs,
            )

        findings = derive_findings(result, stale_after=self._stale_after)
        elapsed  = time.monotonic() - started
        log.info("Audit complete | %d jobs | %d views | %.1fs", len(result.jobs), len(result.views), elapsed)
        return AuditRunResult(
            status       = "success",
            elapsed_secs = elapsed,
            findings     = findings,
            failed_jobs  = result.failed_jobs,
        )
