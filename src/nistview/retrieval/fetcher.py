"""Catalog fetcher: best-effort GET against the configured control endpoints."""

import time
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, Field

from nistview.catalog.models import Control
from nistview.catalog.payload import parse_catalog_payload
from nistview.config.loader import get_catalog_settings
from nistview.utils.logging import get_logger
from nistview.utils.time import utc_now_z

logger = get_logger(__name__)


class EndpointAttempt(BaseModel):
    """Outcome of one endpoint request."""

    url: str
    status_code: Optional[int] = None
    error: Optional[str] = None


class FetchResult(BaseModel):
    """Result of a successful catalog fetch."""

    endpoint: str
    fetched_at_utc: str  # ISO 8601
    status_code: Optional[int] = None
    duration_seconds: Optional[float] = None
    bytes_downloaded: int = 0
    controls: List[Control] = Field(default_factory=list)
    attempts: List[EndpointAttempt] = Field(default_factory=list)


class FetchFailure(RuntimeError):
    """Every configured endpoint failed (network error, timeout, bad status or bad shape)."""

    def __init__(self, message: str, attempts: Optional[List[EndpointAttempt]] = None):
        super().__init__(message)
        self.attempts = attempts or []


class CatalogFetcher:
    """Fetches the control catalog from the first endpoint that answers correctly."""

    def __init__(
        self,
        catalog_config: Optional[Dict[str, Any]] = None,
        *,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize fetcher.

        Args:
            catalog_config: Resolved catalog settings. If None, built-in defaults are used.
            session: HTTP session to issue requests with (injected by tests)
        """
        if catalog_config is None:
            catalog_config = get_catalog_settings()

        self.config = catalog_config
        self.base_url = str(catalog_config.get("base_url", "")).rstrip("/")
        self.endpoints: List[str] = list(catalog_config.get("endpoints") or [])
        self.timeout = catalog_config.get("timeout_seconds", 30)
        self.user_agent = catalog_config.get("user_agent", "nistview/0.1")
        self.session = session if session is not None else requests.Session()

    def _get_headers(self) -> Dict[str, str]:
        """Get HTTP headers for requests."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    def _build_url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def fetch(self) -> FetchResult:
        """
        Fetch controls, trying each configured endpoint in order.

        Returns:
            FetchResult for the first endpoint that returned a valid `controls` array

        Raises:
            FetchFailure: If no endpoint produced a usable catalog
        """
        if not self.endpoints:
            raise FetchFailure("No catalog endpoints configured")

        attempts: List[EndpointAttempt] = []
        fetched_at_utc = utc_now_z()

        for endpoint in self.endpoints:
            url = self._build_url(endpoint)
            start_time = time.monotonic()
            status_code = None

            try:
                logger.info(f"Fetching catalog from {url}")
                response = self.session.get(url, headers=self._get_headers(), timeout=self.timeout)
                status_code = response.status_code
                response.raise_for_status()
                if not 200 <= response.status_code < 300:
                    raise requests.HTTPError(f"Unexpected status {response.status_code}", response=response)
                controls = parse_catalog_payload(response.json())
            except requests.RequestException as req_e:
                if getattr(req_e, "response", None) is not None:
                    status_code = req_e.response.status_code
                error = str(req_e)
            except ValueError as e:
                # CatalogShapeError, or a body that is not JSON
                error = str(e)
            else:
                duration_seconds = time.monotonic() - start_time
                attempts.append(EndpointAttempt(url=url, status_code=status_code))
                logger.info(f"Fetched {len(controls)} controls from {url}")
                return FetchResult(
                    endpoint=url,
                    fetched_at_utc=fetched_at_utc,
                    status_code=status_code,
                    duration_seconds=duration_seconds,
                    bytes_downloaded=len(response.content or b""),
                    controls=controls,
                    attempts=attempts,
                )

            logger.warning(f"Failed to fetch from {url}: {error}")
            attempts.append(EndpointAttempt(url=url, status_code=status_code, error=error))

        raise FetchFailure(
            f"All {len(attempts)} catalog endpoints failed",
            attempts=attempts,
        )
