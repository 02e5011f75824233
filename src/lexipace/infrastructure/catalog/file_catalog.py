"""
Word list catalogs — Infrastructure adapters for the ItemCatalog port.

FileItemCatalog reads a JSON or YAML list of entries such as
``{"id": "the", "frequency": 56271872, "rank": 1}``. Entries exported by the
original Chinese word lists (``汉字`` / ``频数`` / ``排名``) are accepted too.
"""

import json
import logging
from collections.abc import Iterable, Set
from pathlib import Path
from typing import Any

import yaml  # type: ignore
import yaml.error

from lexipace.domain.errors import CatalogLoadError
from lexipace.domain.learning.models import ItemMeta
from lexipace.domain.learning.ports import ItemCatalog

logger = logging.getLogger(__name__)

ID_KEYS = ("id", "item_id", "word", "汉字")
FREQUENCY_KEYS = ("frequency", "freq", "频数")
RANK_KEYS = ("rank", "排名")


def _first(entry: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in entry:
            return entry[key]
    return None


def parse_entry(entry: Any, position: int) -> ItemMeta:
    """
    Normalize one raw word list entry.

    Entries without a rank are ranked by their position in the file (1-based).
    """
    if isinstance(entry, str):
        return ItemMeta(item_id=entry, frequency=0, rank=position + 1)
    if not isinstance(entry, dict):
        raise CatalogLoadError(f"Entry #{position} is not a mapping: {entry!r}")

    item_id = _first(entry, ID_KEYS)
    if item_id is None or str(item_id) == "":
        raise CatalogLoadError(f"Entry #{position} has no id (expected one of {ID_KEYS})")

    frequency = _first(entry, FREQUENCY_KEYS)
    rank = _first(entry, RANK_KEYS)
    try:
        return ItemMeta(
            item_id=str(item_id),
            frequency=int(frequency) if frequency is not None else 0,
            rank=int(rank) if rank is not None else position + 1,
        )
    except (TypeError, ValueError) as e:
        raise CatalogLoadError(f"Entry #{position} ({item_id!r}) has a bad number: {e}") from e


class InMemoryItemCatalog(ItemCatalog):
    """
    Catalog over an in-memory list of items.

    Items are ordered by rank ascending, then frequency descending.
    """

    def __init__(self, items: Iterable[ItemMeta]):
        self._items: list[ItemMeta] = []
        self._index: dict[str, ItemMeta] = {}
        self._set_items(items)

    def _set_items(self, items: Iterable[ItemMeta]) -> None:
        ordered = sorted(items, key=lambda m: (m.rank, -m.frequency))
        self._index = {}
        self._items = []
        for meta in ordered:
            if meta.item_id in self._index:
                logger.warning(f"Duplicate catalog entry {meta.item_id!r}; keeping the first")
                continue
            self._index[meta.item_id] = meta
            self._items.append(meta)

    def __len__(self) -> int:
        return len(self._items)

    def list_unlearned_ranked(self, exclude_ids: Set[str], limit: int) -> list[ItemMeta]:
        if limit <= 0:
            return []
        picked: list[ItemMeta] = []
        for meta in self._items:
            if meta.item_id in exclude_ids:
                continue
            picked.append(meta)
            if len(picked) >= limit:
                break
        return picked

    def get_meta(self, item_id: str) -> ItemMeta | None:
        return self._index.get(item_id)

    def all_items(self) -> list[ItemMeta]:
        return list(self._items)


class FileItemCatalog(InMemoryItemCatalog):
    """
    Catalog loaded from a ``.json``, ``.yaml`` or ``.yml`` word list.

    The file is read once, on first use.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._loaded = False
        super().__init__([])

    def load(self) -> None:
        if self._loaded:
            return

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise CatalogLoadError(f"Cannot read word list {self.path}: {e}") from e

        try:
            if self.path.suffix.lower() == ".json":
                raw = json.loads(text)
            else:
                raw = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.error.YAMLError) as e:
            raise CatalogLoadError(f"Cannot parse word list {self.path}: {e}") from e

        if isinstance(raw, dict) and "items" in raw:
            raw = raw["items"]
        if not isinstance(raw, list):
            raise CatalogLoadError(f"Word list {self.path} must contain a list of entries")

        self._set_items(parse_entry(entry, i) for i, entry in enumerate(raw))
        self._loaded = True
        logger.info(f"Loaded {len(self)} items from {self.path}")

    def list_unlearned_ranked(self, exclude_ids: Set[str], limit: int) -> list[ItemMeta]:
        self.load()
        return super().list_unlearned_ranked(exclude_ids, limit)

    def get_meta(self, item_id: str) -> ItemMeta | None:
        self.load()
        return super().get_meta(item_id)

    def all_items(self) -> list[ItemMeta]:
        self.load()
        return super().all_items()

    def __len__(self) -> int:
        self.load()
        return super().__len__()
