"""Embedded fallback catalog shipped with the package."""

import json
from pathlib import Path
from typing import List, Optional

from nistview.catalog.models import Control
from nistview.catalog.payload import CatalogShapeError, parse_catalog_payload
from nistview.retrieval.errors import LoadError
from nistview.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_FALLBACK_PATH = Path(__file__).resolve().parent.parent / "data" / "fallback_controls.json"


def load_fallback_controls(path: Optional[Path] = None) -> List[Control]:
    """
    Load the embedded fallback catalog.

    Args:
        path: Optional override for the fallback file

    Returns:
        Non-empty list of controls

    Raises:
        LoadError: If the file is absent, unreadable, malformed, or empty
    """
    fallback_path = Path(path) if path else DEFAULT_FALLBACK_PATH
    if not fallback_path.exists():
        raise LoadError(f"Fallback catalog not found: {fallback_path}")

    try:
        with fallback_path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
        controls = parse_catalog_payload(payload)
    except (OSError, json.JSONDecodeError, CatalogShapeError) as e:
        raise LoadError(f"Fallback catalog is unusable ({fallback_path}): {e}") from e

    if not controls:
        raise LoadError(f"Fallback catalog is empty: {fallback_path}")

    logger.debug(f"Loaded {len(controls)} controls from {fallback_path}")
    return controls
