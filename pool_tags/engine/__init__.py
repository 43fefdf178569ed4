"""Engine components: fetch → dedup → format → export."""

from .dedup import DeduplicationResult, DeduplicationStore
from .fetcher import Fetcher
from .formatter import TagFormatter, abbreviate_number, is_valid_record
from .records import NormalizedTag, PoolKind, RawPool

__all__ = [
    "DeduplicationResult",
    "DeduplicationStore",
    "Fetcher",
    "NormalizedTag",
    "PoolKind",
    "RawPool",
    "TagFormatter",
    "abbreviate_number",
    "is_valid_record",
]
