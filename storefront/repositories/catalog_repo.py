# storefront/repositories/catalog_repo.py
import json
from pathlib import Path

from storefront.schemas.catalog import CatalogItem, Category, SpecialOption

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class CatalogRepository:
    """
    Read-only catalog loaded from the packaged JSON files.

    Items and special options are consumed, never mutated, by the rest
    of the application.
    """

    def __init__(self, data_dir: Path = DATA_DIR):
        self.data_dir = data_dir
        self._categories: list[Category] = []
        self._special_options: list[SpecialOption] = []
        self._items: dict[str, CatalogItem] = {}
        self._options: dict[str, SpecialOption] = {}
        self.load()

    def load(self) -> None:
        categories_raw = json.loads((self.data_dir / "categories.json").read_text(encoding="utf-8"))
        options_raw = json.loads((self.data_dir / "special-options.json").read_text(encoding="utf-8"))

        self._categories = [Category.model_validate(c) for c in categories_raw["categories"]]
        self._special_options = [
            SpecialOption.model_validate(o) for o in options_raw["specialOptions"]
        ]

        self._items = {}
        for category in self._categories:
            for item in category.items:
                if item.id in self._items:
                    raise ValueError(f"Duplicate catalog item id: {item.id}")
                self._items[item.id] = item
        self._options = {o.id: o for o in self._special_options}

    def list_categories(self) -> list[Category]:
        return list(self._categories)

    def get_category(self, category_id: str) -> Category | None:
        return next((c for c in self._categories if c.id == category_id), None)

    def list_items(self) -> list[CatalogItem]:
        return list(self._items.values())

    def get_item(self, item_id: str) -> CatalogItem | None:
        return self._items.get(item_id)

    def list_special_options(self) -> list[SpecialOption]:
        return list(self._special_options)

    def get_special_option(self, option_id: str) -> SpecialOption | None:
        return self._options.get(option_id)
