from __future__ import annotations

import json
from pathlib import Path

import pytest

from explorewards.content.items import DEFAULT_ITEMS_PATH, load_items_json


def test_load_items_json_default_registry() -> None:
    registry = load_items_json(DEFAULT_ITEMS_PATH)
    assert registry.schema_version == 1
    assert [item.item_id for item in registry.items] == sorted(item.item_id for item in registry.items)
    assert registry.by_id()["servo_module"].category == "module"
    assert registry.by_id()["servo_module"].tags == ("rare", "robot")


def test_load_items_json_rejects_unknown_category(tmp_path: Path) -> None:
    path = tmp_path / "items.json"
    path.write_text(
        json.dumps(
            {
                "schema_version": 1,
                "items": [{"item_id": "bad", "name": "Bad", "category": "vehicle"}],
            }
        ),
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="category must be one of"):
        load_items_json(path)


def test_load_items_json_rejects_duplicate_ids(tmp_path: Path) -> None:
    path = tmp_path / "items.json"
    path.write_text(
        json.dumps(
            {
                "schema_version": 1,
                "items": [
                    {"item_id": "ore", "name": "Ore"},
                    {"item_id": "ore", "name": "More Ore"},
                ],
            }
        ),
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="duplicate item_id: ore"):
        load_items_json(path)
