"""
Object storage access for uploaded CSV files.
Downloads from Google Cloud Storage in production; reads a local directory
laid out as ``<LOCAL_STORAGE_DIR>/<bucket>/<name>`` during development.
"""
import logging
import os
from typing import Optional

from google.cloud import storage

from ..core.config import settings
from ..core.exceptions import UpstreamFetchError

logger = logging.getLogger(__name__)


class ObjectStore:
    """Fetch raw object bytes by (bucket, object name)."""

    def __init__(self, local_dir: Optional[str] = None, project: Optional[str] = None):
        self.local_dir = local_dir if local_dir is not None else settings.LOCAL_STORAGE_DIR
        self.project = project or settings.GCP_PROJECT
        self._client: Optional[storage.Client] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def download(self, bucket: str, name: str) -> bytes:
        """Return the object's content; any failure becomes ``UpstreamFetchError``."""
        try:
            if self.local_dir:
                return self._read_local(bucket, name)
            return self._download_from_cloud(bucket, name)
        except UpstreamFetchError:
            raise
        except Exception as exc:
            logger.error("Fetching gs://%s/%s failed: %s", bucket, name, exc)
            raise UpstreamFetchError(f"Could not fetch {bucket}/{name}: {exc}") from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_local(self, bucket: str, name: str) -> bytes:
        base = os.path.abspath(os.path.join(self.local_dir, bucket))
        path = os.path.abspath(os.path.join(base, name))
        if not path.startswith(base + os.sep):
            raise UpstreamFetchError(f"Object name escapes the bucket directory: {name}")
        with open(path, "rb") as fh:
            return fh.read()

    def _download_from_cloud(self, bucket: str, name: str) -> bytes:
        if self._client is None:
            self._client = storage.Client(project=self.project)
        blob = self._client.bucket(bucket).blob(name)
        return blob.download_as_bytes()


object_store = ObjectStore()
