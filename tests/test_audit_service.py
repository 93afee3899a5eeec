from datetime import timedelta

import pytest

from jenkins_audit.application.audit_service import AuditApplicationService
from jenkins_audit.application.config_export import ConfigExportService
from jenkins_audit.application.orchestrator import FetchOrchestrator
from jenkins_audit.application.report import render_report
from jenkins_audit.domain.entities import AuditFindings, BuildOverview, ViewDetail
from jenkins_audit.domain.errors import TransportError

from fakes import FakeJenkinsFetcher, MemoryConfigStorage, overview, summary


def _fetcher(**kwargs) -> FakeJenkinsFetcher:
    return FakeJenkinsFetcher(
        jobs      = ["A", "B", "C"],
        views     = ["All", "team"],
        overviews = {
            "A": overview("A", last_build=5, last_success=5),
            "B": overview("B"),
            "C": overview("C", last_build=3, last_success=0),
        },
        # epoch millis: far in the past, so A is stale whatever "now" is
        builds    = {"A": BuildOverview(timestamp=86_400_000, duration_millis=1)},
        details   = {"team": ViewDetail(name="team", description="", jobs=(summary("A"),))},
        **kwargs,
    )


@pytest.mark.asyncio
async def test_execute_derives_findings() -> None:
    service = AuditApplicationService(FetchOrchestrator(_fetcher()))

    result = await service.execute()

    assert result.status == "success"
    assert result.error_message is None
    assert result.findings.outside_views == ("B", "C")
    assert result.findings.never_run == ("B",)
    assert result.findings.never_passed == ("C",)
    assert len(result.findings.stale) == 1
    assert result.findings.stale[0].startswith("A ")


@pytest.mark.asyncio
async def test_execute_reports_jobs_that_failed_enrichment() -> None:
    service = AuditApplicationService(FetchOrchestrator(_fetcher(job_errors={"C": TransportError("reset")})))

    result = await service.execute()

    assert result.status == "success"
    assert result.failed_jobs == ("C",)
    assert result.findings.never_passed == ()
    assert "C" in result.findings.outside_views


@pytest.mark.asyncio
async def test_fatal_error_becomes_failed_result() -> None:
    service = AuditApplicationService(FetchOrchestrator(_fetcher(view_errors={"team": TransportError("reset")})))

    result = await service.execute()

    assert result.status == "failed"
    assert result.findings is None
    assert "team" in result.error_message


@pytest.mark.asyncio
async def test_save_mode_exports_instead_of_deriving() -> None:
    fetcher = _fetcher()
    storage = MemoryConfigStorage()
    service = AuditApplicationService(FetchOrchestrator(fetcher), exporter=ConfigExportService(fetcher, storage))

    result = await service.execute(save_mode=True)

    assert result.status == "success"
    assert result.findings is None
    assert result.saved_configs == 1
    assert list(storage.files) == ["team/A.xml"]


@pytest.mark.asyncio
async def test_save_mode_needs_exporter() -> None:
    with pytest.raises(ValueError):
        await AuditApplicationService(FetchOrchestrator(_fetcher())).execute(save_mode=True)


@pytest.mark.asyncio
async def test_stale_threshold_is_passed_through() -> None:
    service = AuditApplicationService(FetchOrchestrator(_fetcher()), stale_after=timedelta(days=100_000))

    result = await service.execute()

    assert result.findings.stale == ()


def test_render_report_sections_in_order() -> None:
    findings = AuditFindings(
        outside_views = ("C",),
        never_run     = ("B",),
        never_passed  = ("C",),
        stale         = ("A 8 days ago",),
    )

    assert render_report(findings) == (
        "No view specified:\n- C\n\n"
        "Jobs never run:\n- B\n\n"
        "Jobs never passed:\n- C\n\n"
        "Stale jobs:\n- A 8 days ago\n\n"
    )


def test_render_report_omits_empty_sections() -> None:
    findings = AuditFindings(outside_views=(), never_run=("x", "y"), never_passed=(), stale=())

    assert render_report(findings) == "Jobs never run:\n- x\n- y\n\n"
    assert render_report(AuditFindings((), (), (), ())) == ""
