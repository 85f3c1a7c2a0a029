"""Content catalog, image fetching and the predictive prefetch cache."""

from wrapgrid.prefetch.cache import CacheStats, PrefetchCache
from wrapgrid.prefetch.catalog import BOOK_ISBNS, BookCatalog
from wrapgrid.prefetch.distance import cyclic_distance, preload_candidates, ring_neighbors
from wrapgrid.prefetch.fetcher import UrllibImageFetcher
from wrapgrid.prefetch.payload import (
    CacheEntry,
    FallbackPayload,
    Payload,
    PayloadKind,
    RealPayload,
    make_fallback,
)

__all__ = [
    "BOOK_ISBNS",
    "BookCatalog",
    "CacheEntry",
    "CacheStats",
    "FallbackPayload",
    "Payload",
    "PayloadKind",
    "PrefetchCache",
    "RealPayload",
    "UrllibImageFetcher",
    "cyclic_distance",
    "make_fallback",
    "preload_candidates",
    "ring_neighbors",
]
