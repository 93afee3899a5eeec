"""
Domain Layer — Interfaces (Abstract Contracts)
-----------------------------------------------
Abstract definitions of what the infrastructure must provide. The
application layer depends on these, never on the concrete classes.

Tests replace JenkinsClient with a fake fetcher that simulates latency,
timeouts and malformed payloads without any network access.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path

from .entities import AuditResult, BuildOverview, JobOverview, JobSummary, ViewDetail, ViewSummary


class IJenkinsFetcher(ABC):
    """
    Contract that any Jenkins API client must fulfil.

    Every method raises FetchError (TransportError or DecodeError) when the
    resource cannot be retrieved.
    """

    @abstractmethod
    async def fetch_root(self) -> AuditResult:
        """Fetch the top-level job and view listing, not yet enriched."""
        ...

    @abstractmethod
    async def fetch_job(self, job: JobSummary) -> JobOverview:
        ...

    @abstractmethod
    async def fetch_build(self, job: JobSummary, number: int) -> BuildOverview:
        ...

    @abstractmethod
    async def fetch_view(self, view: ViewSummary) -> ViewDetail:
        ...

    @abstractmethod
    async def fetch_config(self, job: JobSummary) -> bytes:
        """Return the job's config.xml document as opaque bytes."""
        ...


class IConfigStorage(ABC):
    """Contract for where save mode puts job configuration documents."""

    @abstractmethod
    def prepare_view(self, view_name: str) -> Path:
        """Create the folder for one view. Returns its path."""
        ...

    @abstractmethod
    def save(self, view_name: str, job_name: str, data: bytes) -> Path:
        """Write one job's config verbatim. Returns the written path."""
        ...
