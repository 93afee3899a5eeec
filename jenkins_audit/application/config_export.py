from __future__ import annotations

import logging

from jenkins_audit.domain.entities import AuditResult
from jenkins_audit.domain.errors import FetchError
from jenkins_audit.domain.interfaces import IConfigStorage, IJenkinsFetcher

log = logging.getLogger(__name__)


class ConfigExportService:
    """
    Save mode: downloads every job's config.xml and files it under the
    views that list the job. Runs sequentially.

    A job that cannot be fetched or written is logged and skipped; the
    export carries on with the next one.
    """

    def __init__(self, fetcher: IJenkinsFetcher, storage: IConfigStorage) -> None:
        self._fetcher = fetcher
        self._storage = storage

    async def export(self, result: AuditResult) -> int:
        """Returns the number of config files written."""
        saved = 0

        for view in result.views:
            if view.name.lower() == "all":
                continue

            log.info("Working on view: %s", view.name)
            try:
                self._storage.prepare_view(view.name)
            except OSError as exc:
                log.error("Cannot create folder for view %s: %s", view.name, exc)
                continue

            if view.detail is None:
                continue

            for job in view.detail.jobs:
                try:
                    data = await self._fetcher.fetch_config(job)
                except FetchError as exc:
                    log.error("Could not fetch config for %s: %s", job.name, exc)
                    continue
                try:
                    path = self._storage.save(view.name, job.name, data)
                except OSError as exc:
                    log.error("Could not save config for %s: %s", job.name, exc)
                    continue

                log.info("Saving: %s", path)
                saved += 1

        log.info("Export complete | %d configs saved", saved)
        return saved
