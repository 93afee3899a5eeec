from __future__ import annotations
import logging
from datetime import datetime, timedelta, timezone

from jenkins_audit.domain.entities import AuditFindings, AuditResult

log = logging.getLogger(__name__)

STALE_AFTER = timedelta(days=7)
ALL_VIEW    = "All"


def stale_jobs(result: AuditResult, now: datetime | None = None, threshold: timedelta = STALE_AFTER) -> list[str]:
    """
    Jobs whose last build started more than `threshold` before `now`,
    oldest first, as "<name> <days> days ago".

    Jobs that never built, or whose build timestamp is unknown, are left out.
    """
    now    = now or datetime.now(tz=timezone.utc)
    cutoff = now - threshold
    target: list[str] = []

    for job in sorted(result.jobs, key=lambda j: j.last_build_timestamp):
        if job.overview is None or not job.overview.last_build.exists:
            continue
        timestamp = job.last_build_timestamp
        if timestamp <= 0:
            continue

        stamp = datetime.fromtimestamp(timestamp // 1000, tz=timezone.utc)
        if stamp < cutoff:
            days = int((now - stamp) / timedelta(hours=1) / 24)
            target.append(f"{job.name} {days} days ago")

    return target


def never_passed(result: AuditResult) -> list[str]:
    return [
        job.name for job in result.jobs
        if job.overview is not None
        and job.overview.last_build.exists
        and not job.overview.last_successful_build.exists
    ]


def never_run(result: AuditResult) -> list[str]:
    return [
        job.name for job in result.jobs
        if job.overview is not None
        and not job.overview.last_build.exists
        and not job.overview.last_successful_build.exists
    ]


def outside_views(result: AuditResult) -> list[str]:
    """Jobs that no view other than "All" lists, in job-index order."""
    found: set[str] = set()
    for view in result.views:
        if view.name == ALL_VIEW or view.detail is None:
            continue
        found.update(job.name for job in view.detail.jobs)

    return [job.name for job in result.jobs if job.name not in found]


def derive_findings(result: AuditResult, now: datetime | None = None, stale_after: timedelta = STALE_AFTER) -> AuditFindings:
    findings = AuditFindings(
        outside_views = tuple(outside_views(result)),
        never_run     = tuple(never_run(result)),
        never_passed  = tuple(never_passed(result)),
        stale         = tuple(stale_jobs(result, now=now, threshold=stale_after)),
    )
    log.info(
        "Findings | outside views=%d | never run=%d | never passed=%d | stale=%d",
        len(findings.outside_views),
        len(findings.never_run),
        len(findings.never_passed),
        len(findings.stale),
    )
    return findings
