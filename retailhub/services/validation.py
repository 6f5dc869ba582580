from typing import Optional

from retailhub.db.models import Inventory
from retailhub.schemas import InventoryCreate, ProductBase
from retailhub.services.base import BaseService


class ValidationService(BaseService):
    """Read-only existence and uniqueness checks, composed by controllers before a mutation."""

    def product_exists(self, product_id: int) -> bool:
        return self.repo.product_exists(product_id)

    def store_exists(self, store_id: int) -> bool:
        return self.repo.store_exists(store_id)

    def product_name_available(self, product: ProductBase) -> bool:
        return self.repo.find_product_by_name(product.name) is None

    def inventory_pair_available(self, inventory: InventoryCreate) -> bool:
        return self.lookup_inventory(inventory.product.id, inventory.store.id) is None

    def lookup_inventory(self, product_id: int, store_id: int) -> Optional[Inventory]:
        return self.repo.find_inventory_by_product_and_store(product_id, store_id)
