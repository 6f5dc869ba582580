from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer,String,Text,Numeric,DateTime,ForeignKey,UniqueConstraint,CheckConstraint,Index
from datetime import datetime, timezone
from decimal import Decimal
from retailhub.db.session import Base

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Store(Base):
    __tablename__='stores'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    inventory = relationship('Inventory', back_populates='store')

class Product(Base):
    __tablename__='products'
    __table_args__ = (CheckConstraint('price >= 0', name='ck_products_price_nonneg'),)
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(240), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    sku: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    inventory = relationship('Inventory', back_populates='product', passive_deletes=True)

class Inventory(Base):
    __tablename__='inventory'
    __table_args__ = (
        UniqueConstraint('product_id', 'store_id', name='uq_inventory_product_store'),
        CheckConstraint('stock_level >= 0', name='ck_inventory_stock_nonneg'),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    store_id: Mapped[int] = mapped_column(ForeignKey('stores.id'), nullable=False, index=True)
    stock_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    product = relationship('Product', back_populates='inventory')
    store = relationship('Store', back_populates='inventory')

class Customer(Base):
    __tablename__='customers'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)

class Review(Base):
    __tablename__='reviews'
    __table_args__ = (
        CheckConstraint('rating BETWEEN 1 AND 5', name='ck_reviews_rating_range'),
        Index('ix_reviews_store_product', 'store_id', 'product_id'),
    )
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    store_id: Mapped[int] = mapped_column(ForeignKey('stores.id'), nullable=False)
    # product and customer are plain references; reviews outlive both
    product_id: Mapped[int] = mapped_column(Integer, nullable=False)
    customer_id: Mapped[int] = mapped_column(Integer, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, default='')

class Order(Base):
    __tablename__ = "orders"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    store_id: Mapped[int] = mapped_column(ForeignKey('stores.id'), nullable=False, index=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey('customers.id'), nullable=False, index=True)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", order_by="OrderItem.id")

class OrderItem(Base):
    __tablename__ = "order_items"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    order = relationship("Order", back_populates="items")
