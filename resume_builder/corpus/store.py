"""Resume corpus loading and embedding access."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from resume_builder.corpus.cache import EmbeddingCache
from resume_builder.corpus.models import (
    Category,
    ContentRecord,
    ContentUnit,
    Contact,
    parse_category,
)
from resume_builder.embeddings.config import EmbeddingConfig, get_embedding_config
from resume_builder.embeddings.provider import (
    EmbeddingProvider,
    Vector,
    coerce_vector,
    provider_name,
)
from resume_builder.embeddings.store import EmbeddingStore
from resume_builder.errors import CorpusLoadError, CorpusParseError
from resume_builder.utils.concurrency import gather_or_cancel

logger = logging.getLogger(__name__)

CorpusSource = Path | str | Mapping[str, Any] | Sequence[Any]


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ())) or "record"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)


class UnitSequence:
    """Lazy, restartable view over corpus units.

    Each iteration walks the corpus again in insertion order, applying the
    optional category filter as it goes.
    """

    def __init__(
        self, units: Sequence[ContentUnit], category: Category | None = None
    ) -> None:
        self._units = units
        self._category = category

    def __iter__(self) -> Iterator[ContentUnit]:
        for unit in self._units:
            if self._category is None or unit.category == self._category:
                yield unit

    def __len__(self) -> int:
        return sum(1 for _ in self)


class CorpusHandle:
    """A loaded corpus: its units, its parse errors, and its embedding cache."""

    def __init__(
        self,
        units: Sequence[ContentUnit],
        provider: EmbeddingProvider,
        *,
        errors: Sequence[CorpusParseError] = (),
        contact: Contact | None = None,
        config: EmbeddingConfig | None = None,
        embedding_store: EmbeddingStore | None = None,
    ) -> None:
        self.units: tuple[ContentUnit, ...] = tuple(units)
        self.errors: tuple[CorpusParseError, ...] = tuple(errors)
        self.contact = contact
        self.provider = provider
        self.config = config or get_embedding_config()
        self.embedding_store = embedding_store
        self.cache = EmbeddingCache()

        self._by_id = {unit.id: unit for unit in self.units}
        self._semaphore = asyncio.Semaphore(self.config.max_concurrency)

    def __len__(self) -> int:
        return len(self.units)

    def all_units(self, category: Category | str | None = None) -> UnitSequence:
        """Return a restartable sequence of units, optionally for one category."""
        if category is not None:
            category = parse_category(category)
        return UnitSequence(self.units, category)

    def get_unit(self, unit_id: str) -> ContentUnit:
        """Look up a unit by id.

        Raises:
            KeyError: If no unit has that id.
        """
        return self._by_id[unit_id]

    async def get_embedding(self, unit: ContentUnit) -> Vector:
        """Return the unit's embedding, computing and caching it on first access.

        Raises:
            EmbeddingProviderError: If the provider fails or returns a
                malformed vector.
            KeyError: If the unit does not belong to this corpus.
        """
        if self._by_id.get(unit.id) != unit:
            raise KeyError(f"Unit {unit.id!r} does not belong to this corpus")

        return await self.cache.get_or_compute(
            unit.id, lambda: self._compute_embedding(unit)
        )

    async def embed_all(
        self, category: Category | str | None = None
    ) -> dict[str, Vector]:
        """Embed every unit (or every unit of one category) concurrently.

        Returns:
            Mapping of unit id to vector, in corpus order.
        """
        units = list(self.all_units(category))
        vectors = await gather_or_cancel(self.get_embedding(unit) for unit in units)

        return {unit.id: vector for unit, vector in zip(units, vectors)}

    async def _compute_embedding(self, unit: ContentUnit) -> Vector:
        model = provider_name(self.provider)

        if self.embedding_store is not None:
            stored = await self.embedding_store.get(model, unit.text)
            if stored is not None and (
                self.config.dimensions is None or stored.size == self.config.dimensions
            ):
                logger.debug(f"Loaded stored embedding for {unit.id}")
                return stored

        async with self._semaphore:
            logger.debug(f"Embedding unit {unit.id}")
            raw = await self.provider.embed(unit.text)

        vector = coerce_vector(raw, self.config.dimensions)

        if self.embedding_store is not None:
            await self.embedding_store.put(model, unit.text, vector)

        return vector


class CorpusStore:
    """Service for loading resume corpora into handles."""

    def __init__(
        self,
        provider: EmbeddingProvider,
        config: EmbeddingConfig | None = None,
        embedding_store: EmbeddingStore | None = None,
    ) -> None:
        self.provider = provider
        self.config = config or get_embedding_config()
        self.embedding_store = embedding_store

    def load(self, source: CorpusSource) -> CorpusHandle:
        """Parse corpus source data into a handle.

        Malformed records are reported in `handle.errors` and skipped; the
        remaining records still load.

        Raises:
            CorpusLoadError: If the source as a whole cannot be read.
        """
        records, contact = self._read_source(source)

        units: list[ContentUnit] = []
        errors: list[CorpusParseError] = []
        seen_ids: set[str] = set()

        for position, raw in enumerate(records, start=1):
            try:
                unit = self._parse_record(raw, position)
            except CorpusParseError as e:
                logger.warning(f"Skipping corpus {e}")
                errors.append(e)
                continue

            if unit.id in seen_ids:
                error = CorpusParseError(position, f"duplicate id {unit.id!r}")
                logger.warning(f"Skipping corpus {error}")
                errors.append(error)
                continue

            seen_ids.add(unit.id)
            units.append(unit)

        logger.info(
            f"Loaded {len(units)} content units ({len(errors)} rejected records)"
        )
        return CorpusHandle(
            units,
            self.provider,
            errors=errors,
            contact=contact,
            config=self.config,
            embedding_store=self.embedding_store,
        )

    def _parse_record(self, raw: Any, position: int) -> ContentUnit:
        if not isinstance(raw, Mapping):
            raise CorpusParseError(position, "record must be a mapping")
        try:
            record = ContentRecord.model_validate(dict(raw))
        except ValidationError as e:
            raise CorpusParseError(position, _format_validation_error(e)) from e
        return record.to_unit(position)

    def _read_source(
        self, source: CorpusSource
    ) -> tuple[Sequence[Any], Contact | None]:
        if isinstance(source, (str, Path)):
            data = self._load_file(Path(source))
        else:
            data = source

        if isinstance(data, Mapping):
            records = data.get("records")
            if records is None:
                records = []
            if not isinstance(records, Sequence) or isinstance(records, (str, bytes)):
                raise CorpusLoadError("Corpus 'records' must be a list")
            return records, self._parse_contact(data.get("contact"))

        if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
            return data, None

        raise CorpusLoadError(
            f"Corpus must be a list of records or a mapping with 'records', "
            f"got {type(data).__name__}"
        )

    def _parse_contact(self, raw: Any) -> Contact | None:
        if raw is None:
            return None
        try:
            return Contact.model_validate(raw)
        except ValidationError as e:
            raise CorpusLoadError(
                f"Invalid contact block: {_format_validation_error(e)}", e
            ) from e

    def _load_file(self, path: Path) -> Any:
        if not path.exists():
            raise CorpusLoadError(f"Corpus not found: {path}")

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise CorpusLoadError(f"Could not read corpus {path}: {e}", e) from e

        suffix = path.suffix.lower()
        if suffix == ".json":
            return self._parse_json(raw, path)
        if suffix in {".yaml", ".yml"}:
            return self._parse_yaml(raw, path)

        # Unknown extension: JSON if it looks like JSON, otherwise YAML
        raw_stripped = raw.lstrip()
        if raw_stripped.startswith("{") or raw_stripped.startswith("["):
            try:
                return json.loads(raw)
            except json.JSONDecodeError:
                pass
        return self._parse_yaml(raw, path)

    def _parse_json(self, raw: str, path: Path) -> Any:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorpusLoadError(f"Invalid JSON corpus: {path}", e) from e

    def _parse_yaml(self, raw: str, path: Path) -> Any:
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise CorpusLoadError(f"Invalid YAML corpus: {path}", e) from e
        return [] if data is None else data
