"""
Order placement.

An order decrements stock for every line and records the order header and
its items in one transaction. Inventory rows are locked in ascending
product id order, so two orders touching overlapping products always
acquire their locks in the same sequence and cannot deadlock. Any failure
rolls the whole transaction back: no partial decrements, no order row.
"""
from decimal import Decimal

from retailhub.core.errors import ErrorKind, ServiceResult, service_err, service_ok
from retailhub.db.models import Customer, Order, OrderItem
from retailhub.schemas import PlaceOrderRequest
from retailhub.services.base import BaseService, transactional


class OrderService(BaseService):

    @transactional(conflict='Order could not be placed')
    def place_order(self, request: PlaceOrderRequest) -> ServiceResult[Order]:
        if not self.repo.store_exists(request.store_id):
            return service_err(ErrorKind.NOT_FOUND, 'Store not found')

        if not request.items:
            return service_err(ErrorKind.INVALID, 'Order must contain at least one item')
        for line in request.items:
            if line.quantity <= 0:
                return service_err(ErrorKind.INVALID, f'Quantity for product {line.product_id} must be positive')

        customer = self._resolve_customer(request)
        if not isinstance(customer, Customer):
            return customer

        # duplicate lines for one product are reserved as a single quantity
        wanted: dict[int, int] = {}
        for line in sorted(request.items, key=lambda l: l.product_id):
            wanted[line.product_id] = wanted.get(line.product_id, 0) + line.quantity

        products = self.repo.get_products(wanted)
        items = []
        total = Decimal('0')
        for product_id, quantity in wanted.items():
            inv = self.repo.find_inventory_by_product_and_store(product_id, request.store_id, for_update=True)
            product = products.get(product_id)
            if inv is None or product is None:
                return service_err(ErrorKind.UNAVAILABLE, f'Product {product_id} is not stocked at store {request.store_id}')
            if inv.stock_level < quantity:
                return service_err(
                    ErrorKind.UNAVAILABLE,
                    f'Insufficient stock for product {product_id}: requested {quantity}, available {inv.stock_level}',
                )
            inv.stock_level -= quantity
            unit_price = Decimal(product.price)
            items.append(OrderItem(product_id=product_id, quantity=quantity, unit_price=unit_price))
            total += unit_price * quantity

        order = self.repo.add_order(
            Order(store_id=request.store_id, customer_id=customer.id, total_price=total),
            items,
        )
        self.logger.info('Placed order %s at store %s for customer %s: %s lines, total %s',
                         order.id, order.store_id, order.customer_id, len(items), total)
        return service_ok(order)

    def _resolve_customer(self, request: PlaceOrderRequest) -> Customer | ServiceResult:
        if request.customer_id is not None:
            customer = self.repo.find_customer_by_id(request.customer_id)
            if customer is None:
                return service_err(ErrorKind.NOT_FOUND, f'Customer {request.customer_id} not found')
            return customer

        name = (request.customer_name or '').strip()
        if not name:
            return service_err(ErrorKind.INVALID, 'Customer id or name is required')

        customer = None
        if request.customer_email:
            customer = self.repo.find_customer_by_email(request.customer_email)
        else:
            customer = self.repo.find_customer_by_name(name)
        if customer is None:
            customer = self.repo.add(Customer(name=name, email=request.customer_email, phone=request.customer_phone))
            self.logger.info('Registered customer %s (%s)', customer.id, name)
        return customer

    def get_order(self, order_id: int) -> ServiceResult[Order]:
        order = self.repo.get_order(order_id)
        if order is None:
            return service_err(ErrorKind.NOT_FOUND, 'Order not found')
        return service_ok(order)
