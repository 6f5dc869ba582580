from typing import List, Optional

from retailhub.db.models import Product
from retailhub.services.base import BaseService

# legacy clients send the literal string "null" in a path segment to mean "no filter"
NULL_SENTINEL = 'null'


def absent(value: Optional[str]) -> Optional[str]:
    if value is None or value == NULL_SENTINEL:
        return None
    return value


class CatalogQuery(BaseService):
    """Read-side product lookups scoped to a store. No locking."""

    def products_for_store(self, store_id: int) -> List[Product]:
        return self.repo.find_products_by_store(store_id)

    def filter(self, store_id: int, category: Optional[str] = None, name: Optional[str] = None) -> List[Product]:
        category, name = absent(category), absent(name)
        if category is None and name is None:
            return self.products_for_store(store_id)
        if category is None:
            return self.repo.find_by_name_like(store_id, name)
        if name is None:
            return self.repo.find_by_category_and_store(store_id, category)
        return self.repo.find_by_name_and_category(store_id, name, category)

    def search_by_name(self, store_id: int, name: str) -> List[Product]:
        return self.filter(store_id, name=name)
