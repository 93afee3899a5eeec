from __future__ import annotations
import logging
from pathlib import Path

from jenkins_audit.domain.interfaces import IConfigStorage

log = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path("jobs")


class FileConfigStorage(IConfigStorage):
    """
    Concrete implementation of IConfigStorage writing to the local disk as
    {root}/{viewName}/{jobName}.xml.

    OSError from the filesystem propagates; the export service decides what
    to skip.
    """

    def __init__(self, root: Path = DEFAULT_OUTPUT_DIR) -> None:
        self._root = root

    def prepare_view(self, view_name: str) -> Path:
        folder = self._root / view_name
        log.info("Creating: %s", folder)
        folder.mkdir(mode=0o755, parents=True, exist_ok=True)
        return folder

    def save(self, view_name: str, job_name: str, data: bytes) -> Path:
        path = self._root / view_name / f"{job_name}.xml"
        path.write_bytes(data)
        log.debug("Wrote %d bytes to %s", len(data), path)
        return path
