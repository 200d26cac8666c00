from __future__ import annotations

import json
import re
import time
from datetime import datetime, timezone
from typing import Any, Iterator, List, Optional

from .logger import setup_logger
from .types import LibraryItem, MaterialRecipe
from .utils import now_iso

logger = setup_logger(__name__)


def new_library_item(recipe: MaterialRecipe, image: str = "", category: str = "Custom") -> LibraryItem:
    return LibraryItem(
        id=str(int(time.time() * 1000)),
        recipe=recipe,
        created_at=datetime.now(timezone.utc),
        category=category,
        image=image or "",
    )


class MaterialLibrary:
    """Saved recipes for the current browser session, newest first."""

    def __init__(self, items: Optional[List[LibraryItem]] = None) -> None:
        self.items: List[LibraryItem] = list(items or [])

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[LibraryItem]:
        return iter(self.items)

    def add(self, item: LibraryItem) -> LibraryItem:
        self.items.insert(0, item)
        logger.info("Saved %r to library (%d items)", item.name, len(self.items))
        return item

    def remove(self, item_id: str) -> bool:
        before = len(self.items)
        self.items = [it for it in self.items if it.id != item_id]
        return len(self.items) < before

    def search(self, query: str) -> List[LibraryItem]:
        needle = str(query or "").strip().lower()
        if not needle:
            return list(self.items)
        return [it for it in self.items if needle in it.name.lower()]


def _plain(artifact: Any) -> Any:
    to_dict = getattr(artifact, "to_dict", None)
    return to_dict() if callable(to_dict) else artifact


def export_json(artifact: Any) -> bytes:
    return json.dumps(_plain(artifact), indent=2, ensure_ascii=False).encode("utf-8")


def export_mat(recipe: MaterialRecipe) -> bytes:
    """Material property file for CAD import: a small JSON document with a ``.mat`` name."""
    data = {
        "material": recipe.name,
        "quadrant": recipe.quadrant,
        "properties": {prop.name: prop.value for prop in recipe.properties},
        "timestamp": now_iso(),
    }
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")


def export_filename(name: str, suffix: str) -> str:
    stem = re.sub(r"\s+", "_", str(name or "").strip()) or "material"
    return f"{stem}{suffix}"
