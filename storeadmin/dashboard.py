"""
Admin dashboard: product statistics grouped by category, subcategory and brand.

The aggregator only sees store client objects, handed in at construction.
"""

import logging
from operator import attrgetter
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Tuple, TypeVar

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from .auth import get_current_user
from .config import DASHBOARD_SORT_BY_NAME
from .models import User
from .schemas import BrandGroup, CategoryGroup, DashboardOut, ProductOut, SubcategoryGroup
from .stores import ProductStore, StoreError, UserStore, get_product_store, get_user_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["dashboard"])

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


def group_by_key(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    # first-seen key order; members keep input order, so no bucket is empty
    groups: Dict[K, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def _name_order(group: Any) -> Tuple[bool, str]:
    # None sorts after every real name
    return (group.name is None, group.name or "")


class DashboardAggregator:
    """Builds the dashboard snapshot from a product store and a user store."""

    def __init__(self, products: ProductStore, users: UserStore, sort_by_name: bool = False):
        self.products = products
        self.users = users
        self.sort_by_name = sort_by_name

    async def snapshot(self) -> DashboardOut:
        # StoreError propagates, there are no partial results
        total_products = await self.products.count()
        category_counts = await self.products.count_by_category()
        products = await self.products.list_all()
        total_users = await self.users.count()

        categories = self._categories(category_counts, products)
        brands = self._brands(products)
        if self.sort_by_name:
            categories.sort(key=_name_order)
            brands.sort(key=_name_order)

        return DashboardOut(
            count_overall_products=total_products,
            formatted_categories=categories,
            formatted_brands=brands,
            count_total_users=total_users,
        )

    def _categories(
        self, category_counts: List[Tuple[Optional[str], int]], products: list
    ) -> List[CategoryGroup]:
        # Subcategories are keyed by (category, subcategory) so a subcategory
        # name shared by two categories yields one group under each
        by_category: Dict[Optional[str], List[SubcategoryGroup]] = {}
        for (category, subcategory), members in group_by_key(
            products, attrgetter("category", "subcategory")
        ).items():
            by_category.setdefault(category, []).append(
                SubcategoryGroup(
                    name=subcategory,
                    count=len(members),
                    products=[ProductOut.model_validate(p) for p in members],
                )
            )

        groups = []
        for category, count in category_counts:
            subcategories = by_category.get(category, [])
            if self.sort_by_name:
                subcategories = sorted(subcategories, key=_name_order)
            groups.append(CategoryGroup(name=category, count=count, subcategories=subcategories))
        return groups

    def _brands(self, products: list) -> List[BrandGroup]:
        return [
            BrandGroup(
                name=brand,
                count=len(members),
                products=[ProductOut.model_validate(p) for p in members],
            )
            for brand, members in group_by_key(products, attrgetter("brand_name")).items()
        ]


def get_dashboard_aggregator(
    products: ProductStore = Depends(get_product_store),
    users: UserStore = Depends(get_user_store),
) -> DashboardAggregator:
    return DashboardAggregator(products, users, sort_by_name=DASHBOARD_SORT_BY_NAME)


@router.get("/dashboard", response_model=DashboardOut)
async def admin_dashboard(
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
    current_user: User = Depends(get_current_user),
):
    try:
        return await aggregator.snapshot()
    except StoreError:
        logger.exception("Error in admin dashboard for %s", current_user.email)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content="Internal server error")
