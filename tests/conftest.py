"""
Pytest configuration and shared fixtures.

The stores are replaced with in-memory fakes through FastAPI dependency
overrides, so none of the tests needs a database.
"""

import pytest
from fastapi.testclient import TestClient

from storeadmin.auth import create_access_token
from storeadmin.main import app
from storeadmin.models import Product, User
from storeadmin.stores import StoreError, get_product_store, get_user_store


class FakeProductStore:
    """In-memory stand-in for ProductStore."""

    def __init__(self, products=None, fail=False):
        self.products = {p.id: p for p in (products or [])}
        self.fail = fail

    def _check(self):
        if self.fail:
            raise StoreError("simulated product store outage")

    def _ordered(self):
        return [self.products[pid] for pid in sorted(self.products)]

    async def count(self):
        self._check()
        return len(self.products)

    async def count_by_category(self):
        self._check()
        counts = {}
        for p in self._ordered():
            counts[p.category] = counts.get(p.category, 0) + 1
        return list(counts.items())

    async def list_all(self, category=None, subcategory=None, brand_name=None, newest_first=False):
        self._check()
        out = [
            p for p in self._ordered()
            if (category is None or p.category == category)
            and (subcategory is None or p.subcategory == subcategory)
            and (brand_name is None or p.brand_name == brand_name)
        ]
        return list(reversed(out)) if newest_first else out

    async def get(self, product_id):
        self._check()
        return self.products.get(product_id)

    async def add(self, product):
        self._check()
        product.id = max(self.products, default=0) + 1
        self.products[product.id] = product
        return product

    async def save(self, product):
        self._check()
        return product

    async def delete(self, product):
        self._check()
        del self.products[product.id]


class FakeUserStore:
    """In-memory stand-in for UserStore."""

    def __init__(self, users=None, fail=False):
        self.users = list(users or [])
        self.fail = fail

    def _check(self):
        if self.fail:
            raise StoreError("simulated user store outage")

    async def count(self):
        self._check()
        return len(self.users)

    async def find_by_email(self, email):
        self._check()
        return next((u for u in self.users if u.email == email), None)

    async def add(self, user):
        self._check()
        user.id = len(self.users) + 1
        self.users.append(user)
        return user


def make_product(id, category, subcategory, brand_name, name=None, price=10.0, stock=5):
    return Product(
        id=id,
        name=name or f"Product {id}",
        price=price,
        category=category,
        subcategory=subcategory,
        brand_name=brand_name,
        stock=stock,
    )


@pytest.fixture
def catalogue():
    """Six products; "Casual" exists under two categories, one product has no category."""
    return [
        make_product(1, "Footwear", "Running", "Stride"),
        make_product(2, "Footwear", "Running", "Summit"),
        make_product(3, "Footwear", "Casual", "Stride"),
        make_product(4, "Apparel", "Tops", "Summit"),
        make_product(5, None, None, None),
        make_product(6, "Apparel", "Casual", "Harbor"),
    ]


@pytest.fixture
def admin_user():
    return User(id=1, email="admin@example.com", full_name="Store Admin", password_hash="unused", is_admin=True)


@pytest.fixture
def product_store(catalogue):
    return FakeProductStore(catalogue)


@pytest.fixture
def user_store(admin_user):
    return FakeUserStore([admin_user, User(id=2, email="clerk@example.com", full_name="Clerk", password_hash="unused", is_admin=False)])


@pytest.fixture
def client(product_store, user_store):
    """Test client wired to the fake stores."""
    app.dependency_overrides[get_product_store] = lambda: product_store
    app.dependency_overrides[get_user_store] = lambda: user_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_token(admin_user):
    return create_access_token({"sub": admin_user.email})


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}
