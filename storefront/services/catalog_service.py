# storefront/services/catalog_service.py
import math

from fastapi import HTTPException, status

from storefront.repositories.catalog_repo import CatalogRepository
from storefront.schemas.catalog import CatalogPage, CategoryRead

ITEMS_PER_PAGE = 12


class CatalogService:
    """
    Catalog browsing: category filter, name search and pagination.
    """

    def __init__(self, catalog_repo: CatalogRepository):
        self.catalog_repo = catalog_repo

    def list_categories(self) -> list[CategoryRead]:
        return [
            CategoryRead(id=c.id, name=c.name, item_count=len(c.items))
            for c in self.catalog_repo.list_categories()
        ]

    def browse(
        self,
        category_id: str | None = None,
        search: str = "",
        page: int = 1,
        per_page: int = ITEMS_PER_PAGE,
    ) -> CatalogPage:
        """
        Return one page of the browsing grid.

        Rules:
          - no category → special options first, then every catalog item
          - category    → that category's items only (404 if unknown)
          - search is a case-insensitive substring match on the name
          - page is clamped to [1, total_pages]
        """
        if category_id is None:
            entries = [
                *self.catalog_repo.list_special_options(),
                *self.catalog_repo.list_items(),
            ]
        else:
            category = self.catalog_repo.get_category(category_id)
            if category is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Category not found",
                )
            entries = list(category.items)

        needle = search.strip().lower()
        if needle:
            entries = [e for e in entries if needle in e.name.lower()]

        total_pages = max(1, math.ceil(len(entries) / per_page))
        page = min(max(1, page), total_pages)
        start = (page - 1) * per_page

        return CatalogPage(
            category_id=category_id,
            search=search,
            page=page,
            total_pages=total_pages,
            total_entries=len(entries),
            entries=entries[start : start + per_page],
        )
