from datetime import datetime
from decimal import Decimal
from pydantic import AfterValidator, BaseModel, Field, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, List

def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError('must not be empty')
    return v

Text = Annotated[str, AfterValidator(_not_blank)]

# exact decimal in, JSON number out
Money = Annotated[
    Decimal,
    Field(ge=0, max_digits=12, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used='json'),
]

class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    def dump(self) -> dict:
        return self.model_dump(mode='json', by_alias=True)

# ---------- stores ----------
class StoreCreate(CamelModel):
    name: Text
    address: Text

# ---------- products ----------
class ProductBase(CamelModel):
    name: Text
    category: Text
    price: Money
    sku: Text
class ProductCreate(ProductBase): pass
class ProductUpdate(ProductBase):
    id: int
class ProductRead(ProductBase):
    id: int

# ---------- inventory ----------
class Ref(BaseModel):
    id: int
class InventoryCreate(CamelModel):
    product: Ref
    store: Ref
    stock_level: int = Field(ge=0)
class CombinedRequest(CamelModel):
    product: Ref
    inventory: InventoryCreate

# ---------- reviews ----------
class ReviewCreate(CamelModel):
    store_id: int
    product_id: int
    customer_id: int
    rating: int = Field(ge=1, le=5)
    comment: str = ''
class ReviewView(CamelModel):
    rating: int
    comment: str
    customer_name: str

# ---------- orders ----------
class OrderLine(CamelModel):
    product_id: int
    quantity: int

    @model_validator(mode='before')
    @classmethod
    def _accept_id(cls, data):
        # storefront clients send {"id": ..} for a purchased product
        if isinstance(data, dict) and 'productId' not in data and 'product_id' not in data and 'id' in data:
            data = {**data, 'productId': data['id']}
        return data

class PlaceOrderRequest(CamelModel):
    store_id: int
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    items: List[OrderLine] = []

    @model_validator(mode='before')
    @classmethod
    def _accept_purchase_product(cls, data):
        if isinstance(data, dict) and 'items' not in data and 'purchaseProduct' in data:
            data = {**data, 'items': data['purchaseProduct']}
        return data

class OrderItemRead(CamelModel):
    product_id: int
    quantity: int
    unit_price: Money
class OrderRead(CamelModel):
    id: int
    store_id: int
    customer_id: int
    total_price: Money
    created_at: datetime
    items: List[OrderItemRead] = []
