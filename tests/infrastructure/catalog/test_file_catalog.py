import json
from pathlib import Path

import pytest

from lexipace.domain.errors import CatalogLoadError
from lexipace.domain.learning.models import ItemMeta
from lexipace.infrastructure.catalog.file_catalog import FileItemCatalog, InMemoryItemCatalog


def test_in_memory_catalog_orders_by_rank_then_frequency():
    catalog = InMemoryItemCatalog(
        [
            ItemMeta("c", frequency=10, rank=2),
            ItemMeta("a", frequency=5, rank=1),
            ItemMeta("b", frequency=50, rank=2),
        ]
    )
    assert [m.item_id for m in catalog.all_items()] == ["a", "b", "c"]


def test_unlearned_skips_excluded_and_respects_limit():
    catalog = InMemoryItemCatalog([ItemMeta(f"i{n}", rank=n) for n in range(1, 6)])

    picked = catalog.list_unlearned_ranked({"i1", "i3"}, limit=2)

    assert [m.item_id for m in picked] == ["i2", "i4"]
    assert catalog.list_unlearned_ranked(set(), limit=0) == []


def test_duplicates_keep_first_ranked_entry():
    catalog = InMemoryItemCatalog([ItemMeta("x", 1, rank=3), ItemMeta("x", 2, rank=1)])
    assert len(catalog) == 1
    assert catalog.get_meta("x").rank == 1


def test_get_meta_unknown_is_none():
    assert InMemoryItemCatalog([]).get_meta("nope") is None


def test_json_word_list_with_original_keys(tmp_path: Path):
    path = tmp_path / "chars.json"
    path.write_text(
        json.dumps(
            [
                {"排名": 31, "汉字": "目", "频数": 15000000, "注音": "mù"},
                {"排名": 30, "汉字": "口", "频数": 16000000, "注音": "kǒu"},
            ],
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )

    catalog = FileItemCatalog(path)

    assert catalog.get_meta("目") == ItemMeta("目", frequency=15000000, rank=31)
    assert [m.item_id for m in catalog.list_unlearned_ranked(set(), 5)] == ["口", "目"]


def test_yaml_word_list_ranks_missing_by_position(tmp_path: Path):
    path = tmp_path / "words.yaml"
    path.write_text(
        "items:\n"
        "  - id: the\n"
        "    frequency: 1000\n"
        "  - id: of\n"
        "    frequency: 900\n"
        "  - and\n",
        encoding="utf-8",
    )

    catalog = FileItemCatalog(path)

    assert [m.item_id for m in catalog.all_items()] == ["the", "of", "and"]
    assert catalog.get_meta("and") == ItemMeta("and", frequency=0, rank=3)


def test_missing_file_raises(tmp_path: Path):
    catalog = FileItemCatalog(tmp_path / "missing.json")
    with pytest.raises(CatalogLoadError):
        catalog.get_meta("a")


def test_entry_without_id_raises(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{"frequency": 3}]), encoding="utf-8")
    with pytest.raises(CatalogLoadError, match="no id"):
        FileItemCatalog(path).load()


def test_non_list_document_raises(tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text("just: a mapping\n", encoding="utf-8")
    with pytest.raises(CatalogLoadError):
        FileItemCatalog(path).load()


def test_malformed_yaml_raises(tmp_path: Path):
    path = tmp_path / "broken.yml"
    path.write_text("- id: [unclosed\n", encoding="utf-8")
    with pytest.raises(CatalogLoadError, match="Cannot parse"):
        FileItemCatalog(path).load()


def test_len_loads_the_file(tmp_path: Path):
    path = tmp_path / "words.json"
    path.write_text(json.dumps([{"id": "a", "rank": 1}, {"id": "b", "rank": 2}]), encoding="utf-8")

    assert len(FileItemCatalog(path)) == 2
