"""
main.py — Dependency Wiring (Composition Root)
------------------------------------------------
Wires the pieces together and runs one audit. It holds no business logic:
  1. Reads configuration from the command line (and environment)
  2. Creates the concrete implementations of each interface
  3. Injects them into the classes that need them
  4. Calls the top-level use case (AuditApplicationService.execute)
  5. Prints the report and picks the exit code

Dependency graph:
                       main.py  (wires everything)
                          │
                AuditApplicationService
                 │                  │
        FetchOrchestrator   ConfigExportService ── FileConfigStorage
                 │                  │
                 └── JenkinsClient ─┘
                          │
                    HttpTransport ── httpx.AsyncClient

Usage:
    python -m jenkins_audit.main --url http://jenkins:8080/
    python -m jenkins_audit.main --url http://jenkins:8080/ --save-jobs
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from datetime import timedelta
from pathlib import Path

import httpx

from jenkins_audit.application.audit_service import AuditApplicationService
from jenkins_audit.application.config_export import ConfigExportService
from jenkins_audit.application.orchestrator import DEFAULT_WORKERS, FetchOrchestrator
from jenkins_audit.application.report import render_report
from jenkins_audit.infrastructure.file_storage import DEFAULT_OUTPUT_DIR, FileConfigStorage
from jenkins_audit.infrastructure.jenkins_client import JenkinsClient
from jenkins_audit.infrastructure.transport import DEFAULT_TIMEOUT, HttpTransport

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_STALE_DAYS = 7


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog        = "jenkins-audit",
        description = "Audit a Jenkins server's jobs: stale, never run, never passed, outside views",
    )
    parser.add_argument(
        "--url",
        default = os.environ.get("JENKINS_URL", ""),
        help    = "Jenkins server URL, ending in '/' (default: $JENKINS_URL)",
    )
    parser.add_argument(
        "--save-jobs", "--saveJobs",
        dest   = "save_jobs",
        action = "store_true",
        help   = "Save every job's config.xml to disk, one folder per view",
    )
    parser.add_argument(
        "--output-dir",
        type    = Path,
        default = DEFAULT_OUTPUT_DIR,
        help    = f"Folder for saved configs (default: ./{DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--workers",
        type    = int,
        default = DEFAULT_WORKERS,
        help    = f"Concurrent job fetches (default: {DEFAULT_WORKERS})",
    )
    parser.add_argument(
        "--timeout",
        type    = float,
        default = DEFAULT_TIMEOUT,
        help    = f"Per-request timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--stale-days",
        type    = int,
        default = DEFAULT_STALE_DAYS,
        help    = f"Days without a build before a job counts as stale (default: {DEFAULT_STALE_DAYS})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def validate_args(args: argparse.Namespace) -> str | None:
    """Return an error message for unusable arguments, None when fine."""
    if not args.url:
        return "Please pass the url of your Jenkins server via --url or JENKINS_URL"
    if not args.url.endswith("/"):
        return "--url should end in trailing slash."
    if args.workers < 1:
        return "--workers must be at least 1"
    if args.timeout <= 0:
        return "--timeout must be positive"
    if args.stale_days < 0:
        return "--stale-days must not be negative"
    return None


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level   = logging.DEBUG if verbose else logging.INFO,
        format  = "%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        datefmt = "%H:%M:%S",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


# ---------------------------------------------------------------------------
# Dependency wiring
# ---------------------------------------------------------------------------

async def build_and_run(args: argparse.Namespace) -> int:
    """Wire the dependency graph bottom-up, run the audit, return the exit code."""
    # Jenkins behind a proxy often redirects http:// to https://
    async with httpx.AsyncClient(follow_redirects=True) as client:
        transport = HttpTransport(client=client, timeout=args.timeout)
        jenkins   = JenkinsClient(base_url=args.url, transport=transport)

        orchestrator = FetchOrchestrator(fetcher=jenkins, workers=args.workers)
        exporter     = ConfigExportService(
            fetcher = jenkins,
            storage = FileConfigStorage(root=args.output_dir),
        )
        service = AuditApplicationService(
            orchestrator = orchestrator,
            exporter     = exporter,
            stale_after  = timedelta(days=args.stale_days),
        )

        result = await service.execute(save_mode=args.save_jobs)

    if result.status != "success":
        log.error("Error %s", result.error_message)
        return 1

    if result.failed_jobs:
        log.warning("Jobs audited by name only: %s", ", ".join(result.failed_jobs))

    if args.save_jobs:
        log.info("Saved %d job configs to %s in %.1fs", result.saved_configs, args.output_dir, result.elapsed_secs)
    elif result.findings is not None and result.findings.is_empty():
        log.info("No findings: every job is in a view, has run, has passed and is fresh")
    elif result.findings is not None:
        sys.stdout.write(render_report(result.findings))
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    error = validate_args(args)
    if error:
        log.error(error)
        return 2

    return asyncio.run(build_and_run(args))


if __name__ == "__main__":
    sys.exit(main())
