from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Iterable

from . import config, logging

KNOWN_CATEGORIES = ("haptic-nav", "urban-access", "embodied-theory")

CATEGORY_COLORS = {
    "haptic-nav": "#ffffff",
    "urban-access": "#bbbbbb",
    "embodied-theory": "#666666",
}
DEFAULT_CATEGORY_COLOR = "#888888"


class CatalogError(ValueError):
    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class ReferenceRecord:
    id: str
    year: int
    title: str = ""
    authors: str = ""
    category: str = "other"
    summary: str = ""
    url: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _norm_tags(self.tags))

    @property
    def category_label(self) -> str:
        return self.category.replace("-", " ").upper()

    @property
    def short_label(self) -> str:
        first = (self.authors.split() or [""])[0]
        return f"{first} '{str(self.year)[-2:]}"

    @property
    def color(self) -> str:
        return CATEGORY_COLORS.get(self.category, DEFAULT_CATEGORY_COLOR)


def _norm_tags(raw: Any) -> frozenset[str]:
    # Strings and mappings are not tag lists.
    if raw is None or isinstance(raw, (str, bytes, dict)):
        return frozenset()
    try:
        items = list(raw)
    except TypeError:
        return frozenset()
    return frozenset(str(t).strip() for t in items if str(t or "").strip())


def record_from_dict(raw: dict[str, Any]) -> ReferenceRecord:
    rid = str(raw.get("id", "") or "").strip()
    if not rid:
        raise CatalogError("record without id")
    try:
        year = int(raw.get("year"))
    except (TypeError, ValueError):
        raise CatalogError(f"record {rid!r} has no integer year") from None
    category = str(raw.get("category", raw.get("type", "")) or "").strip().lower() or "other"
    return ReferenceRecord(
        id=rid,
        year=year,
        title=str(raw.get("title", "") or ""),
        authors=str(raw.get("authors", "") or ""),
        category=category,
        summary=str(raw.get("summary", "") or ""),
        url=str(raw.get("url", "") or "").strip(),
        tags=_norm_tags(raw.get("tags")),
    )


def parse_records(items: Iterable[Any]) -> list[ReferenceRecord]:
    out: list[ReferenceRecord] = []
    seen: set[str] = set()
    for i, raw in enumerate(items):
        if isinstance(raw, ReferenceRecord):
            rec = raw
        elif isinstance(raw, dict):
            try:
                rec = record_from_dict(raw)
            except CatalogError as exc:
                logging.warn("skipping record", i, str(exc))
                continue
        else:
            logging.warn("skipping record", i, "not an object:", type(raw).__name__)
            continue
        if rec.id in seen:
            logging.warn("skipping record", i, "duplicate id", rec.id)
            continue
        seen.add(rec.id)
        out.append(rec)
    return out


def load_catalog(path: str | None = None) -> list[ReferenceRecord]:
    target = path or config.CATALOG_PATH
    if not os.path.exists(target):
        raise CatalogError(f"catalog not found: {target}", target)
    try:
        with open(target, "r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"catalog unreadable: {exc}", target) from exc
    if isinstance(data, dict):
        data = data.get("references", [])
    if not isinstance(data, list):
        raise CatalogError("catalog must be a list of records", target)
    records = parse_records(data)
    logging.info("loaded catalog", target, "records=", len(records))
    return records
