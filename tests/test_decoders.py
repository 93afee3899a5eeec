import json

import pytest

from jenkins_audit.domain.entities import BuildReference, HealthReport, JobSummary
from jenkins_audit.domain.errors import DecodeError
from jenkins_audit.infrastructure.decoders import (
    decode_build_overview,
    decode_job_overview,
    decode_root,
    decode_view_detail,
)


def _raw(payload) -> bytes:
    return json.dumps(payload).encode()


def test_decode_root() -> None:
    result = decode_root(_raw({
        "_class": "hudson.model.Hudson",
        "mode": "NORMAL",
        "jobs": [
            {"_class": "hudson.model.FreeStyleProject", "name": "build", "url": "http://j/job/build/", "color": "blue"},
            {"name": "deploy", "url": "http://j/job/deploy/", "color": "notbuilt"},
        ],
        "views": [{"name": "All", "url": "http://j/"}, {"name": "team", "url": "http://j/view/team/"}],
    }))

    assert result.jobs == (
        JobSummary(name="build", url="http://j/job/build/", color="blue"),
        JobSummary(name="deploy", url="http://j/job/deploy/", color="notbuilt"),
    )
    assert [v.name for v in result.views] == ["All", "team"]
    assert result.views[0].color == ""
    assert all(v.detail is None for v in result.views)


def test_decode_root_without_jobs_or_views() -> None:
    result = decode_root(b"{}")

    assert result.jobs == ()
    assert result.views == ()


def test_decode_job_overview() -> None:
    overview = decode_job_overview(_raw({
        "name": "build",
        "url": "http://j/job/build/",
        "color": "red",
        "buildable": True,
        "lastBuild": {"_class": "hudson.model.FreeStyleBuild", "number": 12, "url": "http://j/job/build/12/"},
        "lastSuccessfulBuild": {"number": 10, "url": "http://j/job/build/10/"},
        "healthReport": [
            {"description": "Build stability: 2 out of the last 5 builds failed.", "score": 60, "iconUrl": "health-60to79.png"},
        ],
    }))

    assert overview.last_build == BuildReference(number=12, url="http://j/job/build/12/")
    assert overview.last_successful_build.number == 10
    assert overview.health_reports == (
        HealthReport(score=60, description="Build stability: 2 out of the last 5 builds failed."),
    )


def test_decode_job_overview_never_built() -> None:
    overview = decode_job_overview(_raw({
        "name": "idle",
        "url": "http://j/job/idle/",
        "color": "notbuilt",
        "lastBuild": None,
        "lastSuccessfulBuild": None,
        "healthReport": [],
    }))

    assert overview.last_build.number == 0
    assert not overview.last_build.exists
    assert not overview.last_successful_build.exists
    assert overview.health_reports == ()


def test_decode_build_overview() -> None:
    build = decode_build_overview(_raw({
        "number": 12,
        "result": "SUCCESS",
        "timestamp": 1_760_000_000_123,
        "duration": 45_000,
    }))

    assert build.timestamp == 1_760_000_000_123
    assert build.duration_millis == 45_000


def test_decode_view_detail() -> None:
    detail = decode_view_detail(_raw({
        "name": "team",
        "description": None,
        "jobs": [{"name": "build", "url": "http://j/job/build/", "color": "blue"}],
        "property": [],
    }))

    assert detail.name == "team"
    assert detail.description == ""
    assert [j.name for j in detail.jobs] == ["build"]


@pytest.mark.parametrize(
    "decoder, raw",
    [
        (decode_root, b"<html>Jenkins is starting</html>"),
        (decode_root, b""),
        (decode_root, b"[1, 2]"),
        (decode_root, _raw({"jobs": {"name": "x"}})),
        (decode_root, _raw({"jobs": ["x"]})),
        (decode_job_overview, _raw({"lastBuild": {"number": "12"}})),
        (decode_job_overview, _raw({"lastBuild": {"number": True}})),
        (decode_job_overview, _raw({"name": 5})),
        (decode_build_overview, _raw({"timestamp": 1.5})),
        (decode_view_detail, b"\xff\xfe"),
    ],
)
def test_malformed_payloads_raise_decode_error(decoder, raw: bytes) -> None:
    with pytest.raises(DecodeError):
        decoder(raw)
