"""CDN cache purge (bunny.net purge API via requests)."""
from __future__ import annotations

import logging

import requests
from pydantic import BaseModel

from dimagram import config
from dimagram.core.errors import CacheInvalidationError

logger = logging.getLogger(__name__)


class CdnConfig(BaseModel):
    """Configuration for the CDN in front of the remote store."""

    api_key: str = ""
    cdn_base_url: str = ""
    purge_endpoint: str = config.CDN_PURGE_ENDPOINT
    timeout: float = config.CDN_TIMEOUT_SEC

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.cdn_base_url)

    @property
    def base_url(self) -> str:
        return self.cdn_base_url.rstrip("/")

    def pointer_url(self, pointer_name: str = config.POINTER_NAME) -> str:
        return f"{self.base_url}/{pointer_name}"

    def content_url(self, address: str, content_dir: str = config.CONTENT_DIR) -> str:
        return f"{self.base_url}/{content_dir}/{address}"

    @classmethod
    def from_env(cls) -> CdnConfig:
        """Create config from environment variables."""
        return cls(
            api_key=config.CDN_API_KEY,
            cdn_base_url=config.CDN_URL,
            purge_endpoint=config.CDN_PURGE_ENDPOINT,
        )


class CdnInvalidator:
    """Purges cached URLs. Callers treat every failure as advisory."""

    def __init__(self, cdn_config: CdnConfig, session: requests.Session | None = None) -> None:
        self.config = cdn_config
        self._session = session or requests.Session()

    def purge(self, url: str) -> None:
        """Purge url from the CDN cache; raises CacheInvalidationError on failure."""
        if not self.config.is_configured:
            raise CacheInvalidationError(
                "required CDN settings not set (DIMAGRAM_CDN_API_KEY, DIMAGRAM_CDN_URL)"
            )
        try:
            resp = self._session.post(
                self.config.purge_endpoint,
                params={"url": url},
                headers={"AccessKey": self.config.api_key, "Content-Type": "application/json"},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise CacheInvalidationError(f"error sending purge request: {e}") from e
        if not 200 <= resp.status_code < 300:
            raise CacheInvalidationError(f"API error (status {resp.status_code}): {resp.text}")
        logger.info("Invalidated CDN cache for %s", url)
