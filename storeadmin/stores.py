"""
Store clients for products and users.

The rest of the application talks to the database only through these
objects. They are handed out per request by the ``get_product_store`` /
``get_user_store`` dependencies, so tests can swap them for in-memory fakes
via ``app.dependency_overrides``.
"""

from typing import List, Optional, Tuple

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_session
from .models import Product, User


class StoreError(Exception):
    """A query against a backing store failed."""


class ProductStore:
    """Product collection client bound to one session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count(self) -> int:
        try:
            res = await self.session.execute(select(func.count()).select_from(Product))
            return res.scalar_one()
        except SQLAlchemyError as exc:
            raise StoreError("counting products failed") from exc

    async def count_by_category(self) -> List[Tuple[Optional[str], int]]:
        """
        Per-category product counts, computed by the database.

        Returns:
            ``(category, count)`` pairs ordered by the lowest product id in
            each category; NULL categories come back as one ``None`` row
        """
        stmt = (
            select(Product.category, func.count(Product.id))
            .group_by(Product.category)
            .order_by(func.min(Product.id))
        )
        try:
            res = await self.session.execute(stmt)
            return [(category, count) for category, count in res.all()]
        except SQLAlchemyError as exc:
            raise StoreError("grouping products by category failed") from exc

    async def list_all(
        self,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        brand_name: Optional[str] = None,
        newest_first: bool = False,
    ) -> List[Product]:
        stmt = select(Product)
        if category is not None:
            stmt = stmt.where(Product.category == category)
        if subcategory is not None:
            stmt = stmt.where(Product.subcategory == subcategory)
        if brand_name is not None:
            stmt = stmt.where(Product.brand_name == brand_name)
        stmt = stmt.order_by(Product.id.desc() if newest_first else Product.id)
        try:
            res = await self.session.execute(stmt)
            return list(res.scalars().all())
        except SQLAlchemyError as exc:
            raise StoreError("listing products failed") from exc

    async def get(self, product_id: int) -> Optional[Product]:
        try:
            res = await self.session.execute(select(Product).where(Product.id == product_id))
            return res.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError(f"loading product {product_id} failed") from exc

    async def add(self, product: Product) -> Product:
        try:
            self.session.add(product)
            await self.session.commit()
            await self.session.refresh(product)
            return product
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StoreError("saving product failed") from exc

    async def save(self, product: Product) -> Product:
        try:
            await self.session.commit()
            await self.session.refresh(product)
            return product
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StoreError(f"updating product {product.id} failed") from exc

    async def delete(self, product: Product) -> None:
        try:
            await self.session.delete(product)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StoreError(f"deleting product {product.id} failed") from exc


class UserStore:
    """User collection client bound to one session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def count(self) -> int:
        try:
            res = await self.session.execute(select(func.count()).select_from(User))
            return res.scalar_one()
        except SQLAlchemyError as exc:
            raise StoreError("counting users failed") from exc

    async def find_by_email(self, email: str) -> Optional[User]:
        try:
            res = await self.session.execute(select(User).where(User.email == email))
            return res.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError("looking up user failed") from exc

    async def add(self, user: User) -> User:
        # IntegrityError is left to the caller, it means the email is taken
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user


def get_product_store(session: AsyncSession = Depends(get_session)) -> ProductStore:
    return ProductStore(session)


def get_user_store(session: AsyncSession = Depends(get_session)) -> UserStore:
    return UserStore(session)
