from retailhub.core.errors import ErrorKind, ServiceResult, service_err, service_ok
from retailhub.db.models import Inventory
from retailhub.schemas import CombinedRequest, InventoryCreate
from retailhub.services.base import BaseService, transactional
from retailhub.services.validation import ValidationService


class InventoryService(BaseService):
    def __init__(self, repo, validation: ValidationService):
        super().__init__(repo)
        self.validation = validation

    @transactional()
    def update_stock(self, request: CombinedRequest) -> ServiceResult[Inventory]:
        """Overwrite the stock level of an existing (product, store) row.

        The row is locked for the rest of the transaction so a concurrent
        order placement on the same pair waits for this write.
        """
        if not self.validation.product_exists(request.product.id):
            return service_err(ErrorKind.NOT_FOUND, 'Product does not exist')

        inv = self.repo.find_inventory_by_product_and_store(
            request.inventory.product.id, request.inventory.store.id, for_update=True
        )
        if inv is None:
            return service_err(ErrorKind.NOT_FOUND, 'No data available')

        inv.stock_level = request.inventory.stock_level
        self.repo.flush()
        self.logger.info('Stock for product %s at store %s set to %s', inv.product_id, inv.store_id, inv.stock_level)
        return service_ok(inv)

    @transactional(conflict='Data is already present')
    def create(self, inventory: InventoryCreate) -> ServiceResult[Inventory]:
        if not self.validation.product_exists(inventory.product.id):
            return service_err(ErrorKind.NOT_FOUND, 'Product does not exist')
        if not self.validation.store_exists(inventory.store.id):
            return service_err(ErrorKind.NOT_FOUND, 'Store does not exist')
        if not self.validation.inventory_pair_available(inventory):
            return service_err(ErrorKind.CONFLICT, 'Data is already present')

        inv = self.repo.add(Inventory(
            product_id=inventory.product.id,
            store_id=inventory.store.id,
            stock_level=inventory.stock_level,
        ))
        return service_ok(inv)

    @transactional()
    def remove_product(self, product_id: int, delete_product: bool = True) -> ServiceResult[int]:
        """Drop every inventory row of a product, and the product row itself when asked.

        Returns the number of inventory rows removed.
        """
        if not self.validation.product_exists(product_id):
            return service_err(ErrorKind.NOT_FOUND, 'Product not present in database')

        removed = self.repo.delete_inventory_by_product_id(product_id)
        if delete_product:
            self.repo.delete_product(product_id)
        self.logger.info('Removed %s inventory rows for product %s (product row %s)',
                         removed, product_id, 'deleted' if delete_product else 'kept')
        return service_ok(removed)

    def check_availability(self, product_id: int, store_id: int, quantity: int) -> bool:
        # advisory snapshot; order placement re-checks under a row lock
        inv = self.validation.lookup_inventory(product_id, store_id)
        return inv is not None and inv.stock_level >= quantity
