from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, replace

from jenkins_audit.domain.entities import AuditResult, JobSummary, ViewSummary
from jenkins_audit.domain.errors import FatalFetchError, FetchError
from jenkins_audit.domain.interfaces import IJenkinsFetcher

log = logging.getLogger(__name__)

DEFAULT_WORKERS = 4
QUEUE_FACTOR    = 3


@dataclass(frozen=True)
class _JobFetch:
    """One unit of Stage 1 work: the job and the slot it owns."""
    job:   JobSummary
    index: int


class FetchOrchestrator:
    """
    Builds the full AuditResult graph in two stages.

    Stage 1 enriches jobs with a fixed pool of worker coroutines fed from a
    bounded queue. A failing job is logged and left as a bare summary; the
    pool keeps draining. Stage 2 then enriches views one at a time, and any
    failure there aborts the run.

    The fetcher is injected, so tests can drive the orchestration with a
    fake that simulates latency and failures.
    """

    def __init__(self, fetcher: IJenkinsFetcher, workers: int = DEFAULT_WORKERS, queue_factor: int = QUEUE_FACTOR) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self._fetcher    = fetcher
        self._workers    = workers
        self._queue_size = workers * queue_factor

    async def collect(self) -> AuditResult:
        try:
            root = await self._fetcher.fetch_root()
        except FetchError as exc:
            raise FatalFetchError(f"Could not fetch job listing: {exc}") from exc

        log.info("Root listing | jobs=%d | views=%d", len(root.jobs), len(root.views))

        jobs, failed = await self._enrich_jobs(root.jobs)
        views = await self._enrich_views(root.views)

        return AuditResult(
            jobs        = tuple(jobs),
            views       = tuple(views),
            failed_jobs = tuple(jobs[i].name for i in sorted(failed)),
        )

    async def _enrich_jobs(self, jobs: tuple[JobSummary, ...]) -> tuple[list[JobSummary], set[int]]:
        """
        Stage 1. Each slot of `slots` is written by exactly one unit of work,
        so the list needs no lock; the queue is the only shared structure.
        """
        slots: list[JobSummary] = list(jobs)
        failed: set[int] = set()
        queue: asyncio.Queue[_JobFetch | None] = asyncio.Queue(maxsize=self._queue_size)

        async def produce() -> None:
            for i, job in enumerate(jobs):
                await queue.put(_JobFetch(job=job, index=i))
            for _ in range(self._workers):
                await queue.put(None)

        async def work(worker_id: int) -> None:
            while True:
                item = await queue.get()
                if item is None:
                    return
                enriched = await self._enrich_job(item.job)
                if enriched is None:
                    failed.add(item.index)
                else:
                    slots[item.index] = enriched
                log.debug("Worker %d finished %s", worker_id, item.job.name)

        log.info("Enriching %d jobs | workers=%d | queue=%d", len(jobs), self._workers, self._queue_size)

        tasks = [asyncio.create_task(produce())]
        tasks += [asyncio.create_task(work(n)) for n in range(self._workers)]
        try:
            await asyncio.gather(*tasks)
        finally:
            # only matters when a task raised; the rest are already done
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        if failed:
            log.warning("%d of %d jobs could not be enriched", len(failed), len(jobs))
        return slots, failed

    async def _enrich_job(self, job: JobSummary) -> JobSummary | None:
        """Return the enriched job, or None when its overview is unavailable."""
        try:
            overview = await self._fetcher.fetch_job(job)
        except FetchError as exc:
            log.warning("Skipping job %s: %s", job.name, exc)
            return None

        if overview.last_build.exists:
            try:
                build = await self._fetcher.fetch_build(job, overview.last_build.number)
            except FetchError as exc:
                log.warning("No build overview for %s #%d: %s", job.name, overview.last_build.number, exc)
            else:
                overview = replace(overview, last_build=replace(overview.last_build, overview=build))

        return replace(job, overview=overview)

    async def _enrich_views(self, views: tuple[ViewSummary, ...]) -> list[ViewSummary]:
        """Stage 2, strictly sequential."""
        enriched: list[ViewSummary] = []
        for view in views:
            try:
                detail = await self._fetcher.fetch_view(view)
            except FetchError as exc:
                raise FatalFetchError(f"Could not fetch view {view.name!r}: {exc}") from exc
            log.debug("View %s | %d jobs", view.name, len(detail.jobs))
            enriched.append(replace(view, detail=detail))
        return enriched
