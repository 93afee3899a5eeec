"""
Resource decoders — the anti-corruption layer between Jenkins' JSON and our
domain entities.

    Jenkins sends:            We store as:
      "lastSuccessfulBuild" →  last_successful_build
      "healthReport"        →  health_reports
      "duration"            →  duration_millis

If Jenkins renames a field, fix it HERE only. Missing or null fields default
to zero/empty and unknown fields are ignored; anything of the wrong type
raises DecodeError.
"""

from __future__ import annotations

import json
from typing import Any

from jenkins_audit.domain.entities import (
    AuditResult,
    BuildOverview,
    BuildReference,
    HealthReport,
    JobOverview,
    JobSummary,
    ViewDetail,
    ViewSummary,
)
from jenkins_audit.domain.errors import DecodeError


def _load(raw: bytes, what: str) -> dict[str, Any]:
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"Malformed JSON for {what}: {exc}") from exc
    return _object(payload, what)


def _object(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"Expected an object for {what}, got {type(value).__name__}")
    return value


def _list(obj: dict[str, Any], key: str, what: str) -> list[Any]:
    value = obj.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"Expected a list for {what}.{key}, got {type(value).__name__}")
    return value


def _str(obj: dict[str, Any], key: str, what: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"Expected a string for {what}.{key}, got {type(value).__name__}")
    return value


def _int(obj: dict[str, Any], key: str, what: str) -> int:
    value = obj.get(key)
    if value is None:
        return 0
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"Expected an integer for {what}.{key}, got {type(value).__name__}")
    return value


def job_summary(value: Any) -> JobSummary:
    obj = _object(value, "job")
    return JobSummary(
        name  = _str(obj, "name", "job"),
        url   = _str(obj, "url", "job"),
        color = _str(obj, "color", "job"),
    )


def view_summary(value: Any) -> ViewSummary:
    obj = _object(value, "view")
    return ViewSummary(
        name  = _str(obj, "name", "view"),
        color = _str(obj, "color", "view"),
        url   = _str(obj, "url", "view"),
    )


def build_reference(value: Any) -> BuildReference:
    obj = _object(value, "build reference")
    return BuildReference(
        number = _int(obj, "number", "build reference"),
        url    = _str(obj, "url", "build reference"),
    )


def health_report(value: Any) -> HealthReport:
    obj = _object(value, "health report")
    return HealthReport(
        score       = _int(obj, "score", "health report"),
        description = _str(obj, "description", "health report"),
    )


def decode_root(raw: bytes) -> AuditResult:
    """Decode `{baseURL}api/json` into an un-enriched AuditResult."""
    obj = _load(raw, "root listing")
    return AuditResult(
        jobs  = tuple(job_summary(j) for j in _list(obj, "jobs", "root listing")),
        views = tuple(view_summary(v) for v in _list(obj, "views", "root listing")),
    )


def decode_job_overview(raw: bytes) -> JobOverview:
    obj = _load(raw, "job overview")
    return JobOverview(
        name                  = _str(obj, "name", "job overview"),
        url                   = _str(obj, "url", "job overview"),
        color                 = _str(obj, "color", "job overview"),
        last_build            = build_reference(obj.get("lastBuild")),
        last_successful_build = build_reference(obj.get("lastSuccessfulBuild")),
        health_reports        = tuple(
            health_report(h) for h in _list(obj, "healthReport", "job overview")
        ),
    )


def decode_build_overview(raw: bytes) -> BuildOverview:
    obj = _load(raw, "build overview")
    return BuildOverview(
        timestamp       = _int(obj, "timestamp", "build overview"),
        duration_millis = _int(obj, "duration", "build overview"),
    )


def decode_view_detail(raw: bytes) -> ViewDetail:
    obj = _load(raw, "view detail")
    return ViewDetail(
        name        = _str(obj, "name", "view detail"),
        description = _str(obj, "description", "view detail"),
        jobs        = tuple(job_summary(j) for j in _list(obj, "jobs", "view detail")),
    )
