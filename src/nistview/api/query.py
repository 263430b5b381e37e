"""Query engine: pure, order-preserving filtering of the control catalog."""

from typing import Iterable, List, Optional, Sequence

from ..catalog.models import Control, ImpactLevel, Priority, QueryPredicates
from .models import CatalogStats


def _enum_value(value) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "value", value)


def searchable_fields(control: Control) -> List[str]:
    """All text a standalone search looks at, lowercased, absent fields dropped."""
    fields = [
        control.id,
        control.title,
        control.family,
        control.description,
        control.control_text,
        control.supplemental_guidance,
        _enum_value(control.priority),
        " ".join(_enum_value(level) for level in control.baseline),
        " ".join(f"{e.id} {e.title}" for e in control.control_enhancements),
    ]
    return [f.lower() for f in fields if f]


def _family_scoped_fields(control: Control) -> List[str]:
    """Narrower field set used for text search once a family is selected."""
    fields = [control.id, control.title, control.description, control.control_text]
    return [f.lower() for f in fields if f]


def _matches_text(fields: Iterable[str], term: str) -> bool:
    return any(term in field for field in fields)


def search_controls(records: Sequence[Control], text: str) -> List[Control]:
    """
    Free-text search over every searchable field.

    Empty or whitespace-only text returns every record.
    """
    if not text or not text.strip():
        return list(records)
    term = text.lower()
    return [c for c in records if _matches_text(searchable_fields(c), term)]


def controls_by_family(records: Sequence[Control], family: str) -> List[Control]:
    return [c for c in records if c.family is not None and c.family == family]


def controls_by_baseline(records: Sequence[Control], baseline: ImpactLevel | str) -> List[Control]:
    level = ImpactLevel(baseline)
    return [c for c in records if level in c.baseline]


def controls_by_priority(records: Sequence[Control], priority: Priority | str) -> List[Control]:
    wanted = Priority(priority)
    return [c for c in records if c.priority is not None and c.priority == wanted]


def filter_controls(records: Sequence[Control], predicates: QueryPredicates) -> List[Control]:
    """
    Apply every active predicate (logical AND), preserving input order.

    When a family and a text term are both active, the family narrows first and
    the text term is then matched only against id, title, description and
    control_text. Without a family, text matches every searchable field.

    Args:
        records: Full (or already narrowed) record set
        predicates: Active search/filter criteria

    Returns:
        Matching records in their original relative order
    """
    results = list(records)

    if predicates.family:
        results = controls_by_family(results, predicates.family)
        if predicates.has_text:
            term = predicates.text.lower()
            results = [c for c in results if _matches_text(_family_scoped_fields(c), term)]
    else:
        results = search_controls(results, predicates.text)

    if predicates.baseline is not None:
        results = controls_by_baseline(results, predicates.baseline)

    if predicates.priority is not None:
        results = controls_by_priority(results, predicates.priority)

    return results


def compute_stats(
    all_records: Sequence[Control],
    view: Sequence[Control],
    selected_family: Optional[str] = None,
) -> CatalogStats:
    return CatalogStats(
        total_controls=len(all_records),
        displayed_controls=len(view),
        total_families=len({c.family for c in all_records if c.family}),
        total_enhancements=sum(len(c.control_enhancements) for c in all_records),
        selected_family=selected_family,
    )
