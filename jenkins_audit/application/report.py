from __future__ import annotations

from jenkins_audit.domain.entities import AuditFindings


def _section(title: str, items: tuple[str, ...]) -> list[str]:
    if not items:
        return []
    return [f"{title}:", *(f"- {item}" for item in items), ""]


def render_report(findings: AuditFindings) -> str:
    """
    Render the findings as labeled bulleted sections in a fixed order.
    Empty sections are left out; no findings at all gives "".
    """
    lines = [
        *_section("No view specified", findings.outside_views),
        *_section("Jobs never run", findings.never_run),
        *_section("Jobs never passed", findings.never_passed),
        *_section("Stale jobs", findings.stale),
    ]
    return "\n".join(lines) + "\n" if lines else ""
