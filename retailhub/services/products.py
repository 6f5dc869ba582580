from typing import List, Optional

from retailhub.core.errors import ErrorKind, ServiceResult, service_err, service_ok
from retailhub.db.models import Product
from retailhub.schemas import ProductCreate, ProductUpdate
from retailhub.services.base import BaseService, transactional
from retailhub.services.catalog import absent
from retailhub.services.validation import ValidationService


class ProductService(BaseService):
    def __init__(self, repo, validation: ValidationService):
        super().__init__(repo)
        self.validation = validation

    @transactional(conflict='SKU should be unique')
    def create(self, payload: ProductCreate) -> ServiceResult[Product]:
        if not self.validation.product_name_available(payload):
            return service_err(ErrorKind.CONFLICT, 'Product already present in database')
        if self.repo.find_product_by_sku(payload.sku) is not None:
            return service_err(ErrorKind.CONFLICT, 'SKU should be unique')
        product = self.repo.add(Product(
            name=payload.name,
            category=payload.category,
            price=payload.price,
            sku=payload.sku,
        ))
        self.logger.info('Created product %s (sku %s)', product.id, product.sku)
        return service_ok(product)

    @transactional(conflict='SKU should be unique')
    def update(self, payload: ProductUpdate) -> ServiceResult[Product]:
        product = self.repo.get_product(payload.id)
        if product is None:
            return service_err(ErrorKind.NOT_FOUND, 'Product not found')
        other = self.repo.find_product_by_name(payload.name)
        if other is not None and other.id != product.id:
            return service_err(ErrorKind.CONFLICT, 'Product already present in database')
        product.name = payload.name
        product.category = payload.category
        product.price = payload.price
        product.sku = payload.sku
        self.repo.flush()
        return service_ok(product)

    def get(self, product_id: int) -> ServiceResult[Product]:
        product = self.repo.get_product(product_id)
        if product is None:
            return service_err(ErrorKind.NOT_FOUND, 'Product not found')
        return service_ok(product)

    def list_all(self) -> List[Product]:
        return self.repo.list_products()

    def search(self, name: Optional[str] = None, category: Optional[str] = None) -> List[Product]:
        return self.repo.search_products(name=absent(name), category=absent(category))
