"""Resume corpus store.

Loads structured resume content into immutable content units and serves
their embeddings through a cache scoped to one loaded corpus.

Public API:
    - CorpusStore: Load corpus sources into handles
    - CorpusHandle: Loaded units, parse errors, and embedding access
    - ContentUnit: One atomic resume fragment
    - Category: Closed set of content categories
"""

from resume_builder.corpus.cache import EmbeddingCache
from resume_builder.corpus.models import (
    Category,
    Contact,
    ContentRecord,
    ContentUnit,
    DateRange,
    parse_category,
)
from resume_builder.corpus.store import CorpusHandle, CorpusStore, UnitSequence

__all__ = [
    "CorpusStore",
    "CorpusHandle",
    "UnitSequence",
    "EmbeddingCache",
    "ContentUnit",
    "ContentRecord",
    "Contact",
    "DateRange",
    "Category",
    "parse_category",
]
