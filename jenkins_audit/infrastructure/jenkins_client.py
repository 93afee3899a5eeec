from __future__ import annotations

import logging
from typing import Callable, TypeVar

from jenkins_audit.domain.entities import AuditResult, BuildOverview, JobOverview, JobSummary, ViewDetail, ViewSummary
from jenkins_audit.domain.errors import DecodeError
from jenkins_audit.domain.interfaces import IJenkinsFetcher
from jenkins_audit.infrastructure import decoders
from jenkins_audit.infrastructure.transport import HttpTransport

log = logging.getLogger(__name__)

API_SUFFIX    = "api/json"
CONFIG_SUFFIX = "config.xml"

T = TypeVar("T")


class JenkinsClient(IJenkinsFetcher):
    """
    Concrete implementation of IJenkinsFetcher for Jenkins' JSON API.

    Receives the transport (injected) rather than creating one. Every URL
    handed out by Jenkins already ends in "/", so endpoints are built by
    plain concatenation, as is the base URL.
    """

    def __init__(self, base_url: str, transport: HttpTransport) -> None:
        if not base_url.endswith("/"):
            raise ValueError(f"Jenkins base URL must end in '/': {base_url}")
        self._base_url  = base_url
        self._transport = transport

    async def _get_decoded(self, url: str, decoder: Callable[[bytes], T]) -> T:
        raw = await self._transport.get(url)
        try:
            return decoder(raw)
        except DecodeError as exc:
            exc.url = url
            log.debug("Could not decode %s: %s", url, exc)
            raise

    # IJenkinsFetcher implementation
    async def fetch_root(self) -> AuditResult:
        return await self._get_decoded(self._base_url + API_SUFFIX, decoders.decode_root)

    async def fetch_job(self, job: JobSummary) -> JobOverview:
        return await self._get_decoded(job.url + API_SUFFIX, decoders.decode_job_overview)

    async def fetch_build(self, job: JobSummary, number: int) -> BuildOverview:
        return await self._get_decoded(f"{job.url}{number}/{API_SUFFIX}", decoders.decode_build_overview)

    async def fetch_view(self, view: ViewSummary) -> ViewDetail:
        return await self._get_decoded(view.url + API_SUFFIX, decoders.decode_view_detail)

    async def fetch_config(self, job: JobSummary) -> bytes:
        return await self._transport.get(job.url + CONFIG_SUFFIX)
