"""
Persistence gateway over the catalog tables.

One CatalogRepository wraps one request-scoped Session. Finders never
commit; the service that owns the unit of work decides when to commit or
roll back. Constraint violations raised on flush come back as
IntegrityConflict.
"""
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from retailhub.core.errors import IntegrityConflict
from retailhub.db.models import Customer, Inventory, Order, OrderItem, Product, Review, Store


class CatalogRepository:
    def __init__(self, db: Session):
        self.db = db

    # ---------- unit of work ----------
    def flush(self) -> None:
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise IntegrityConflict(str(e.orig), constraint=_constraint_name(e)) from e

    def commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise IntegrityConflict(str(e.orig), constraint=_constraint_name(e)) from e

    def rollback(self) -> None:
        self.db.rollback()

    def add(self, obj):
        self.db.add(obj)
        self.flush()
        return obj

    # ---------- stores ----------
    def get_store(self, store_id: int) -> Optional[Store]:
        return self.db.get(Store, store_id)

    def store_exists(self, store_id: int) -> bool:
        return self.db.execute(select(Store.id).where(Store.id == store_id)).first() is not None

    # ---------- products ----------
    def get_product(self, product_id: int) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def product_exists(self, product_id: int) -> bool:
        return self.db.execute(select(Product.id).where(Product.id == product_id)).first() is not None

    def find_product_by_name(self, name: str) -> Optional[Product]:
        return self.db.execute(select(Product).where(Product.name == name).limit(1)).scalars().first()

    def find_product_by_sku(self, sku: str) -> Optional[Product]:
        return self.db.execute(select(Product).where(Product.sku == sku)).scalars().first()

    def list_products(self) -> List[Product]:
        return list(self.db.execute(select(Product).order_by(Product.id)).scalars())

    def get_products(self, product_ids: Iterable[int]) -> dict[int, Product]:
        ids = set(product_ids)
        if not ids:
            return {}
        rows = self.db.execute(select(Product).where(Product.id.in_(sorted(ids)))).scalars()
        return {p.id: p for p in rows}

    def delete_product(self, product_id: int) -> int:
        res = self.db.execute(delete(Product).where(Product.id == product_id))
        return res.rowcount or 0

    def search_products(self, name: Optional[str] = None, category: Optional[str] = None) -> List[Product]:
        stmt = select(Product)
        if name is not None:
            stmt = stmt.where(Product.name.contains(name, autoescape=True))
        if category is not None:
            stmt = stmt.where(Product.category == category)
        return list(self.db.execute(stmt.order_by(Product.id)).scalars())

    # ---------- inventory ----------
    def find_inventory_by_product_and_store(self, product_id: int, store_id: int, for_update: bool = False) -> Optional[Inventory]:
        stmt = select(Inventory).where(Inventory.product_id == product_id, Inventory.store_id == store_id)
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalars().first()

    def find_inventory_by_product(self, product_id: int) -> List[Inventory]:
        return list(self.db.execute(select(Inventory).where(Inventory.product_id == product_id)).scalars())

    def delete_inventory_by_product_id(self, product_id: int) -> int:
        res = self.db.execute(delete(Inventory).where(Inventory.product_id == product_id))
        return res.rowcount or 0

    # ---------- catalog finders (store scoped) ----------
    def _store_products(self, store_id: int):
        return (
            select(Product)
            .join(Inventory, Inventory.product_id == Product.id)
            .where(Inventory.store_id == store_id)
            .order_by(Product.id)
        )

    def find_products_by_store(self, store_id: int) -> List[Product]:
        return list(self.db.execute(self._store_products(store_id)).scalars().unique())

    def find_by_name_like(self, store_id: int, name: str) -> List[Product]:
        stmt = self._store_products(store_id).where(Product.name.contains(name, autoescape=True))
        return list(self.db.execute(stmt).scalars().unique())

    def find_by_category_and_store(self, store_id: int, category: str) -> List[Product]:
        stmt = self._store_products(store_id).where(Product.category == category)
        return list(self.db.execute(stmt).scalars().unique())

    def find_by_name_and_category(self, store_id: int, name: str, category: str) -> List[Product]:
        stmt = self._store_products(store_id).where(
            Product.name.contains(name, autoescape=True),
            Product.category == category,
        )
        return list(self.db.execute(stmt).scalars().unique())

    # ---------- customers ----------
    def find_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        return self.db.get(Customer, customer_id)

    def find_customer_by_email(self, email: str) -> Optional[Customer]:
        return self.db.execute(select(Customer).where(Customer.email == email)).scalars().first()

    def find_customer_by_name(self, name: str) -> Optional[Customer]:
        stmt = select(Customer).where(Customer.name == name).order_by(Customer.id).limit(1)
        return self.db.execute(stmt).scalars().first()

    def find_customers_by_ids(self, customer_ids: Iterable[int]) -> dict[int, Customer]:
        ids = set(customer_ids)
        if not ids:
            return {}
        return {c.id: c for c in self.db.execute(select(Customer).where(Customer.id.in_(sorted(ids)))).scalars()}

    # ---------- reviews ----------
    def find_reviews_by_store_and_product(self, store_id: int, product_id: int) -> List[Review]:
        stmt = select(Review).where(Review.store_id == store_id, Review.product_id == product_id).order_by(Review.id)
        return list(self.db.execute(stmt).scalars())

    # ---------- orders ----------
    def add_order(self, order: Order, items: Sequence[OrderItem]) -> Order:
        order.items = list(items)
        self.db.add(order)
        self.flush()
        return order

    def get_order(self, order_id: int) -> Optional[Order]:
        return self.db.get(Order, order_id)


def _constraint_name(e: IntegrityError) -> Optional[str]:
    diag = getattr(e.orig, 'diag', None)
    name = getattr(diag, 'constraint_name', None)
    if name:
        return name
    # sqlite only reports the columns, e.g. "UNIQUE constraint failed: products.sku"
    msg = str(e.orig)
    if 'products.sku' in msg:
        return 'products_sku_key'
    if 'inventory.product_id' in msg:
        return 'uq_inventory_product_store'
    return None
