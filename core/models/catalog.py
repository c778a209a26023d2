# ============================================================================
# CATALOG MODELS
# ============================================================================
# STATUS: Domain model - Published catalog snapshot
# PURPOSE: Tolerant schema for approved.json items and their live counters
# CREATED: 03 SEP 2026
# ============================================================================
"""
Catalog Models

The catalog snapshot (``content-database/approved.json``) is produced by an
offline rebuild from tracking issues and has changed shape over time. Every
field is optional here, and parsing never fails the whole catalog:

- a top-level payload without an ``items`` list is an empty catalog
- an entry that is not an object is skipped with a warning
- odd field values are coerced (ids and text to str, non-object files dropped)
- unparsable baseline counters read as absent

Each CatalogItem keeps the raw dict it was parsed from so that enrichment
can return the snapshot unchanged apart from the overlaid counters.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _lenient_number(value: Any) -> Optional[float]:
    """Parse a counter-ish value; anything unusable becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        text = str(value).strip()
        return float(text) if text else None
    except (TypeError, ValueError):
        return None


class CatalogFile(BaseModel):
    """One downloadable file of a catalog item."""
    name: Optional[str] = None
    url: Optional[str] = None
    size: Any = None
    type: Optional[str] = None
    description: Optional[str] = None

    model_config = {"extra": "allow"}

    @field_validator("name", "url", "type", "description", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _as_text(value)


class CatalogItem(BaseModel):
    """
    One published piece of content.

    ``id`` is the current identifier; ``number`` is the legacy field used by
    older snapshots (the tracking issue number). Either may be numeric or a
    string.
    """

    id: Union[int, str, None] = None
    number: Union[int, str, None] = None

    title: Optional[str] = None
    category: Optional[str] = None
    game: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    date: Optional[str] = None
    version: Optional[str] = None
    compatibility: List[Any] = Field(default_factory=list)
    tags: List[Any] = Field(default_factory=list)
    files: List[CatalogFile] = Field(default_factory=list)

    # Baseline counters - superseded by live counters when present
    likes: Optional[float] = None
    downloads: Optional[float] = None
    rating: Optional[float] = None
    total_ratings: Optional[float] = Field(default=None, alias="totalRatings")

    model_config = {"extra": "allow", "populate_by_name": True}

    _raw: Dict[str, Any] = PrivateAttr(default_factory=dict)

    @field_validator("likes", "downloads", "rating", "total_ratings", mode="before")
    @classmethod
    def _parse_counter(cls, value: Any) -> Optional[float]:
        return _lenient_number(value)

    @field_validator(
        "title", "category", "game", "description", "author", "date", "version", mode="before"
    )
    @classmethod
    def _text(cls, value: Any) -> Optional[str]:
        return _as_text(value)

    @field_validator("id", "number", mode="before")
    @classmethod
    def _identifier(cls, value: Any) -> Union[int, str, None]:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return str(value)

    @field_validator("compatibility", "tags", mode="before")
    @classmethod
    def _list_or_empty(cls, value: Any) -> List[Any]:
        return value if isinstance(value, list) else []

    @field_validator("files", mode="before")
    @classmethod
    def _file_entries(cls, value: Any) -> List[Any]:
        # Bare strings and other non-objects are not files
        if not isinstance(value, list):
            return []
        return [entry for entry in value if isinstance(entry, dict)]

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "CatalogItem":
        item = cls.model_validate(raw)
        item._raw = dict(raw)
        return item

    @property
    def raw(self) -> Dict[str, Any]:
        """A copy of the snapshot dict this item was parsed from."""
        return dict(self._raw)

    @property
    def item_key(self) -> str:
        """Canonical identifier: ``id``, else legacy ``number``, else empty."""
        if self.id is not None and self.id != "":
            return str(self.id)
        if self.number is not None and self.number != "":
            return str(self.number)
        return ""

    def matches(self, item_id: str) -> bool:
        """String-equal match against ``id`` or legacy ``number``."""
        return (
            (self.id is not None and str(self.id) == item_id)
            or (self.number is not None and str(self.number) == item_id)
        )


class Catalog(BaseModel):
    """The whole snapshot."""
    items: List[CatalogItem] = Field(default_factory=list)

    @classmethod
    def parse_payload(cls, payload: Any) -> "Catalog":
        """
        Tolerantly parse a decoded approved.json payload.

        Never raises: malformed top-level payloads give an empty catalog,
        malformed items are dropped.
        """
        if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
            if payload is not None:
                logger.warning("Catalog payload has no items list, treating as empty")
            return cls()

        items: List[CatalogItem] = []
        for index, raw in enumerate(payload["items"]):
            if not isinstance(raw, dict):
                logger.warning(f"Skipping catalog entry {index}: not an object")
                continue
            try:
                items.append(CatalogItem.from_raw(raw))
            except ValidationError as e:
                logger.warning(f"Skipping catalog entry {index}: {e.error_count()} invalid fields")
        return cls(items=items)


@dataclass(frozen=True)
class LiveCounters:
    """
    Counter values read from the store for one item.

    None means the key is absent (or unparsable) and the snapshot value
    should be used instead.
    """
    likes: Optional[int] = None
    downloads: Optional[int] = None
    rating: Optional[float] = None
    rating_count: Optional[int] = None


__all__ = ["CatalogFile", "CatalogItem", "Catalog", "LiveCounters"]
