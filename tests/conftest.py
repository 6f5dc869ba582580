import os
from decimal import Decimal

# the app module builds its engine at import time; tests swap in their own per-test database
os.environ.setdefault("DATABASE_DSN", "sqlite://")

import pytest
from fastapi.testclient import TestClient

from retailhub.api.deps import get_db
from retailhub.db.models import Customer, Inventory, Product, Review, Store
from retailhub.db.repository import CatalogRepository
from retailhub.db.session import Base, build_engine, build_sessionmaker
from retailhub.main import app


@pytest.fixture()
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'retailhub.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def repo(db):
    return CatalogRepository(db)


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class Seeder:
    """Writes fixture rows in short-lived sessions so no transaction stays open between requests."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def _save(self, obj):
        with self.session_factory() as s:
            s.add(obj)
            s.commit()
            return obj.id

    def store(self, name="S1", address="A1"):
        return self._save(Store(name=name, address=address))

    def product(self, name="Apple", category="Fruit", price="1.50", sku=None):
        return self._save(Product(name=name, category=category, price=Decimal(price), sku=sku or f"SKU-{name}"))

    def inventory(self, product_id, store_id, stock_level=10):
        return self._save(Inventory(product_id=product_id, store_id=store_id, stock_level=stock_level))

    def customer(self, name="Ada", email=None):
        return self._save(Customer(name=name, email=email))

    def review(self, store_id, product_id, customer_id, rating=5, comment="Great"):
        return self._save(Review(store_id=store_id, product_id=product_id, customer_id=customer_id, rating=rating, comment=comment))

    def stock(self, product_id, store_id):
        with self.session_factory() as s:
            inv = CatalogRepository(s).find_inventory_by_product_and_store(product_id, store_id)
            return None if inv is None else inv.stock_level

    def count(self, model):
        with self.session_factory() as s:
            return s.query(model).count()


@pytest.fixture()
def seed(session_factory):
    return Seeder(session_factory)
