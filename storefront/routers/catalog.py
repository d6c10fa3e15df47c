# storefront/routers/catalog.py
from fastapi import APIRouter, Depends

from storefront.repositories.catalog_repo import CatalogRepository
from storefront.schemas.catalog import CatalogPage, CategoryRead, SpecialOption
from storefront.services.catalog_service import CatalogService
from storefront.sessions import get_catalog_repo

router = APIRouter(prefix="/catalog", tags=["Catalog"])


def get_catalog_service(
    repo: CatalogRepository = Depends(get_catalog_repo),
) -> CatalogService:
    return CatalogService(repo)


@router.get("/categories", response_model=list[CategoryRead])
def list_categories(service: CatalogService = Depends(get_catalog_service)):
    """List catalog categories with their item counts."""
    return service.list_categories()


@router.get("/special-options", response_model=list[SpecialOption])
def list_special_options(repo: CatalogRepository = Depends(get_catalog_repo)):
    """List the special order options (local store, home pickup, online)."""
    return repo.list_special_options()


@router.get("/items", response_model=CatalogPage)
def browse_items(
    category_id: str | None = None,
    search: str = "",
    page: int = 1,
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Browse the catalog.

    - No category: special options first, then every item.
    - `search` filters by name, case-insensitive.
    - 12 entries per page.
    """
    return service.browse(category_id=category_id, search=search, page=page)
