"""View controller: owns the active predicates and the current filtered view."""

from datetime import date
from typing import List, Optional

from nistview.api.export import build_export
from nistview.api.models import CatalogStats
from nistview.api.query import compute_stats, filter_controls
from nistview.catalog.models import (
    Control,
    ExportFormat,
    ExportRequest,
    ExportScope,
    ImpactLevel,
    Priority,
    QueryPredicates,
)
from nistview.output.sinks import OutputSink
from nistview.retrieval.errors import LoadError
from nistview.retrieval.store import RecordStore
from nistview.utils.logging import get_logger

logger = get_logger(__name__)


class ViewController:
    """Wires load → query → render → export for one session."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.controls: List[Control] = []
        self.families: List[str] = []
        self.predicates = QueryPredicates()
        self.view: List[Control] = []
        self.error: Optional[str] = None

    def load(self) -> List[Control]:
        """
        Load the catalog and reset the view to the full set.

        Raises:
            LoadError: If no record set could be produced (also kept in self.error)
        """
        self.error = None
        try:
            self.controls = self.store.load()
        except LoadError as e:
            self.error = f"Failed to load NIST controls: {e}"
            self.controls = []
            self.families = []
            self.view = []
            raise
        self.families = self.store.families()
        self.predicates = QueryPredicates()
        self.view = list(self.controls)
        return self.view

    def retry(self) -> List[Control]:
        return self.load()

    def apply(self, predicates: QueryPredicates) -> List[Control]:
        """Replace the active predicate set and recompute the view."""
        self.predicates = predicates
        self.view = filter_controls(self.controls, predicates)
        logger.debug(f"View has {len(self.view)} of {len(self.controls)} controls")
        return self.view

    def _update(self, **changes) -> List[Control]:
        return self.apply(self.predicates.model_copy(update=changes))

    def set_search_text(self, text: str) -> List[Control]:
        return self._update(text=text or "")

    def set_family(self, family: Optional[str]) -> List[Control]:
        return self._update(family=family or None)

    def set_baseline(self, baseline: Optional[ImpactLevel | str]) -> List[Control]:
        return self._update(baseline=ImpactLevel(baseline) if baseline else None)

    def set_priority(self, priority: Optional[Priority | str]) -> List[Control]:
        return self._update(priority=Priority(priority) if priority else None)

    def clear_filters(self) -> List[Control]:
        return self.apply(QueryPredicates())

    @property
    def is_empty_view(self) -> bool:
        """True when the catalog is loaded but nothing matches the predicates."""
        return bool(self.controls) and not self.view

    def stats(self) -> CatalogStats:
        return compute_stats(self.controls, self.view, self.predicates.family)

    def export(
        self,
        scope: ExportScope | str,
        fmt: ExportFormat | str,
        sink: OutputSink,
        today: Optional[date] = None,
    ) -> str:
        """
        Serialize the full set (scope=all) or the current view (scope=filtered) and deliver it.

        Returns:
            The sink's delivery message
        """
        request = ExportRequest(
            scope=ExportScope(scope),
            format=ExportFormat(fmt),
            family=self.predicates.family,
        )
        records = self.controls if request.scope == ExportScope.ALL else self.view
        artifact = build_export(records, request, today=today)
        logger.info(f"Exporting {artifact.record_count} controls as {artifact.filename}")
        return sink.deliver(artifact)
