from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class BuildOverview:
    """Timing of one specific build. `timestamp` is epoch milliseconds."""
    timestamp:       int
    duration_millis: int


@dataclass(frozen=True)
class BuildReference:
    """
    Pointer to a build of a job. number == 0 means no such build exists,
    in which case `overview` is always None.
    """
    number:   int
    url:      str
    overview: BuildOverview | None = None

    @property
    def exists(self) -> bool:
        return self.number > 0


@dataclass(frozen=True)
class HealthReport:
    score:       int
    description: str


@dataclass(frozen=True)
class JobOverview:
    name:                  str
    url:                   str
    color:                 str
    last_build:            BuildReference
    last_successful_build: BuildReference
    health_reports:        tuple[HealthReport, ...] = ()


@dataclass(frozen=True)
class JobSummary:
    """
    Immutable domain entity for one job as listed by the server's job index.

    `overview` stays None until the orchestrator enriches the job. Enrichment
    produces a new JobSummary through dataclasses.replace rather than
    mutating this one.
    """
    name:     str
    url:      str
    color:    str
    overview: JobOverview | None = None

    @property
    def last_build_timestamp(self) -> int:
        """Epoch millis of the last build, 0 when unknown."""
        if self.overview is None or self.overview.last_build.overview is None:
            return 0
        return self.overview.last_build.overview.timestamp


@dataclass(frozen=True)
class ViewDetail:
    name:        str
    description: str
    jobs:        tuple[JobSummary, ...] = ()


@dataclass(frozen=True)
class ViewSummary:
    name:   str
    color:  str
    url:    str
    detail: ViewDetail | None = None


@dataclass(frozen=True)
class AuditResult:
    """
    Root of the in-memory object graph built once per run.

    `jobs` keeps the order of the server's job index. `failed_jobs` names the
    jobs whose enrichment failed, also in index order.
    """
    jobs:        tuple[JobSummary, ...]
    views:       tuple[ViewSummary, ...]
    failed_jobs: tuple[str, ...] = ()


@dataclass(frozen=True)
class AuditFindings:
    outside_views: tuple[str, ...]
    never_run:     tuple[str, ...]
    never_passed:  tuple[str, ...]
    stale:         tuple[str, ...]

    def is_empty(self) -> bool:
        return not (self.outside_views or self.never_run or self.never_passed or self.stale)


@dataclass(frozen=True)
class AuditRunResult:
    """
    Immutable value object summarising a completed audit run.
    Returned by the application service when the run finishes.
    """
    status:        str
    elapsed_secs:  float
    findings:      AuditFindings | None = None
    saved_configs: int = 0
    failed_jobs:   tuple[str, ...] = ()
    error_message: str | None = None
