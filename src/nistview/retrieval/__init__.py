from .errors import LoadError
from .fetcher import CatalogFetcher, FetchFailure, FetchResult
from .store import RecordStore

__all__ = [
    "CatalogFetcher",
    "FetchFailure",
    "FetchResult",
    "LoadError",
    "RecordStore",
]
