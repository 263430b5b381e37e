"""Record store: loads the control catalog once, remote first, embedded fallback second."""

from pathlib import Path
from typing import List, Optional, Tuple

import requests
from pydantic import BaseModel, Field

from nistview.catalog.models import Control
from nistview.retrieval.errors import LoadError
from nistview.retrieval.fallback import load_fallback_controls
from nistview.retrieval.fetcher import CatalogFetcher, FetchFailure
from nistview.utils.logging import get_logger
from nistview.utils.time import utc_now_z

logger = get_logger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_FALLBACK = "fallback"

# Canonical SP 800-53 Rev. 5 family names, in catalog order.
KNOWN_FAMILIES: Tuple[str, ...] = (
    "Access Control",
    "Awareness and Training",
    "Audit and Accountability",
    "Assessment, Authorization, and Monitoring",
    "Configuration Management",
    "Contingency Planning",
    "Identification and Authentication",
    "Incident Response",
    "Maintenance",
    "Media Protection",
    "Physical and Environmental Protection",
    "Planning",
    "Program Management",
    "Personnel Security",
    "Personally Identifiable Information Processing and Transparency",
    "Risk Assessment",
    "System and Services Acquisition",
    "System and Communications Protection",
    "System and Information Integrity",
    "Supply Chain Risk Management",
)


class LoadReport(BaseModel):
    """Where the current record set came from."""

    source: str  # remote | fallback
    endpoint: Optional[str] = None
    record_count: int
    loaded_at_utc: str
    fetch_errors: List[str] = Field(default_factory=list)


class RecordStore:
    """Holds the full control catalog for one session."""

    def __init__(
        self,
        fetcher: Optional[CatalogFetcher] = None,
        *,
        fallback_path: Optional[Path] = None,
        offline: bool = False,
    ):
        """
        Args:
            fetcher: Remote catalog fetcher. None (or offline=True) skips the remote fetch.
            fallback_path: Override for the embedded fallback file
            offline: Go straight to the fallback dataset
        """
        self.fetcher = fetcher
        self.fallback_path = fallback_path
        self.offline = offline
        self._controls: Optional[Tuple[Control, ...]] = None
        self.last_load: Optional[LoadReport] = None

    @property
    def is_loaded(self) -> bool:
        return self._controls is not None

    @property
    def controls(self) -> Tuple[Control, ...]:
        if self._controls is None:
            raise LoadError("Catalog has not been loaded")
        return self._controls

    def load(self) -> List[Control]:
        """
        Load the catalog, replacing any previously loaded set.

        Network and shape failures are absorbed and the embedded fallback is used.

        Returns:
            The loaded controls

        Raises:
            LoadError: If the remote fetch failed (or was skipped) and the fallback is unusable
        """
        fetch_errors: List[str] = []

        if self.fetcher is not None and not self.offline:
            try:
                result = self.fetcher.fetch()
            except FetchFailure as e:
                fetch_errors = [f"{a.url}: {a.error}" for a in e.attempts] or [str(e)]
                logger.warning(f"Remote catalog unavailable, using embedded fallback: {e}")
            except requests.RequestException as e:
                fetch_errors = [str(e)]
                logger.warning(f"Remote catalog request failed, using embedded fallback: {e}")
            else:
                if result.controls:
                    return self._commit(result.controls, SOURCE_REMOTE, result.endpoint, fetch_errors)
                fetch_errors = [f"{result.endpoint}: empty controls array"]
                logger.warning(f"Remote catalog at {result.endpoint} is empty, using embedded fallback")

        try:
            controls = load_fallback_controls(self.fallback_path)
        except LoadError as e:
            self._controls = None
            self.last_load = None
            logger.error(f"Failed to load control catalog: {e}")
            raise

        return self._commit(controls, SOURCE_FALLBACK, None, fetch_errors)

    def retry(self) -> List[Control]:
        """Reload after a terminal LoadError (or to refresh the session)."""
        return self.load()

    def _commit(
        self,
        controls: List[Control],
        source: str,
        endpoint: Optional[str],
        fetch_errors: List[str],
    ) -> List[Control]:
        self._controls = tuple(controls)
        self.last_load = LoadReport(
            source=source,
            endpoint=endpoint,
            record_count=len(controls),
            loaded_at_utc=utc_now_z(),
            fetch_errors=fetch_errors,
        )
        logger.info(f"Loaded {len(controls)} controls ({source})")

        unknown = self.unknown_families()
        if unknown:
            logger.warning(f"Catalog contains non-standard families: {', '.join(unknown)}")
        return list(self._controls)

    def unknown_families(self) -> List[str]:
        """Families present in the loaded set that are not SP 800-53 Rev. 5 families."""
        return [f for f in self.families() if f not in KNOWN_FAMILIES]

    def families(self) -> List[str]:
        """Distinct non-empty family names in the loaded set, sorted lexicographically."""
        return sorted({c.family for c in self.controls if c.family})

    def get_control(self, control_id: str) -> Optional[Control]:
        for control in self.controls:
            if control.id == control_id:
                return control
        return None
