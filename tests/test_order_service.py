"""Unit tests for transactional order placement."""

import random
import threading
from decimal import Decimal

import pytest

from retailhub.core.errors import ErrorKind
from retailhub.db.models import Customer, Inventory, Order, OrderItem, Product
from retailhub.db.repository import CatalogRepository
from retailhub.schemas import CombinedRequest, InventoryCreate, PlaceOrderRequest
from retailhub.services.inventory import InventoryService
from retailhub.services.orders import OrderService
from retailhub.services.validation import ValidationService


@pytest.fixture()
def world(seed):
    store = seed.store()
    apple = seed.product("Apple", price="1.50")
    pear = seed.product("Pear", price="2.25")
    seed.inventory(apple, store, 4)
    seed.inventory(pear, store, 10)
    customer = seed.customer("Ada", email="ada@example.com")
    return store, apple, pear, customer


def _order(store_id, lines, **customer):
    customer = customer or {"customerName": "Ada"}
    return PlaceOrderRequest(storeId=store_id, items=[{"productId": p, "quantity": q} for p, q in lines], **customer)


def _place(session_factory, request):
    with session_factory() as s:
        return OrderService(CatalogRepository(s)).place_order(request)


class TestPlaceOrder:

    def test_decrements_stock_and_records_order(self, session_factory, seed, world):
        store, apple, pear, customer = world
        result = _place(session_factory, _order(store, [(apple, 3), (pear, 2)], customerId=customer))

        assert result.ok
        assert seed.stock(apple, store) == 1
        assert seed.stock(pear, store) == 8
        with session_factory() as s:
            order = s.get(Order, result.value.id)
            assert order.customer_id == customer
            assert order.total_price == Decimal("9.00")
            assert order.created_at is not None
            assert sorted((i.product_id, i.quantity, i.unit_price) for i in order.items) == [
                (apple, 3, Decimal("1.50")),
                (pear, 2, Decimal("2.25")),
            ]

    def test_duplicate_lines_are_summed(self, session_factory, seed, world):
        store, apple, _, _ = world
        result = _place(session_factory, _order(store, [(apple, 2), (apple, 2)]))
        assert result.ok
        assert seed.stock(apple, store) == 0
        with session_factory() as s:
            assert [(i.product_id, i.quantity) for i in s.get(Order, result.value.id).items] == [(apple, 4)]

    def test_duplicate_lines_exceeding_stock_fail(self, session_factory, seed, world):
        store, apple, _, _ = world
        result = _place(session_factory, _order(store, [(apple, 3), (apple, 2)]))
        assert result.error is ErrorKind.UNAVAILABLE
        assert seed.stock(apple, store) == 4

    def test_oversell_leaves_no_trace(self, session_factory, seed, world):
        store, apple, pear, _ = world
        # pear sorts after apple, so apple has already been decremented when pear fails
        result = _place(session_factory, _order(store, [(pear, 11), (apple, 1)]))

        assert not result.ok
        assert result.error is ErrorKind.UNAVAILABLE
        assert f"product {pear}" in result.error_detail
        assert seed.stock(apple, store) == 4
        assert seed.stock(pear, store) == 10
        assert seed.count(Order) == 0
        assert seed.count(OrderItem) == 0

    def test_product_not_stocked_at_store(self, session_factory, seed, world):
        store, apple, _, _ = world
        other_store = seed.store("S2")
        result = _place(session_factory, _order(other_store, [(apple, 1)]))
        assert result.error is ErrorKind.UNAVAILABLE
        assert seed.count(Order) == 0

    @pytest.mark.parametrize("lines", [[], [(1, 0)], [(1, -2)]])
    def test_invalid_items(self, session_factory, seed, world, lines):
        store = world[0]
        result = _place(session_factory, _order(store, lines))
        assert result.error is ErrorKind.INVALID
        assert seed.count(Order) == 0

    def test_unknown_store(self, session_factory, world):
        _, apple, _, _ = world
        result = _place(session_factory, _order(999, [(apple, 1)]))
        assert result.error is ErrorKind.NOT_FOUND

    def test_unknown_store_checked_before_items(self, session_factory, world):
        result = _place(session_factory, _order(999, []))
        assert result.error is ErrorKind.NOT_FOUND

    def test_unknown_customer_id(self, session_factory, seed, world):
        store, apple, _, _ = world
        result = _place(session_factory, _order(store, [(apple, 1)], customerId=404))
        assert result.error is ErrorKind.NOT_FOUND
        assert seed.stock(apple, store) == 4

    def test_customer_upserted_by_email(self, session_factory, seed, world):
        store, apple, pear, customer = world
        first = _place(session_factory, _order(store, [(apple, 1)], customerName="Ada L.", customerEmail="ada@example.com"))
        second = _place(session_factory, _order(store, [(pear, 1)], customerName="Grace", customerEmail="grace@example.com"))
        assert first.value.customer_id == customer
        assert second.value.customer_id != customer
        assert seed.count(Customer) == 2

    def test_failed_order_does_not_register_customer(self, session_factory, seed, world):
        store, apple, _, _ = world
        result = _place(session_factory, _order(store, [(apple, 99)], customerName="Linus"))
        assert not result.ok
        assert seed.count(Customer) == 1

    def test_missing_customer_identity(self, session_factory, world):
        store, apple, _, _ = world
        result = _place(session_factory, PlaceOrderRequest(storeId=store, items=[{"id": apple, "quantity": 1}]))
        assert result.error is ErrorKind.INVALID

    def test_price_is_snapshotted(self, session_factory, seed, world):
        store, apple, _, _ = world
        result = _place(session_factory, _order(store, [(apple, 1)]))
        with session_factory() as s:
            s.get(Product, apple).price = Decimal("9.99")
            s.commit()
        with session_factory() as s:
            assert s.get(Order, result.value.id).items[0].unit_price == Decimal("1.50")


class TestConcurrentOrders:

    def test_only_one_of_two_competing_orders_wins(self, session_factory, seed, world):
        store, apple, _, _ = world
        barrier = threading.Barrier(2)
        results = []

        def worker(name):
            barrier.wait()
            results.append(_place(session_factory, _order(store, [(apple, 3)], customerName=name)))

        threads = [threading.Thread(target=worker, args=(n,)) for n in ("A", "B")]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

        assert sorted(r.ok for r in results) == [False, True]
        assert [r.error for r in results if not r.ok] == [ErrorKind.UNAVAILABLE]
        assert seed.stock(apple, store) == 1
        assert seed.count(Order) == 1

    def test_many_small_orders_never_oversell(self, session_factory, seed, world):
        store, _, pear, _ = world
        results = []
        lock = threading.Lock()

        def worker():
            r = _place(session_factory, _order(store, [(pear, 3)]))
            with lock:
                results.append(r)

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

        assert sum(r.ok for r in results) == 3
        assert seed.stock(pear, store) == 1


class TestRandomizedHistory:
    """Replays seeded mixes of orders, restocks and duplicate inventory inserts.

    After every step the database must match a simple in-memory ledger.
    """

    STEPS = 80

    @pytest.fixture()
    def shop(self, seed):
        stores = [seed.store("North"), seed.store("South")]
        prices = {}
        for name, price in [("Apple", "1.50"), ("Pear", "2.25"), ("Fig", "0.99"), ("Plum", "3.10")]:
            prices[seed.product(name, price=price)] = Decimal(price)
        stock = {}
        for store in stores:
            # the last product is never stocked at South, so some lines cannot be served
            for product in list(prices)[: 4 if store == stores[0] else 3]:
                stock[(product, store)] = 5
                seed.inventory(product, store, 5)
        customer = seed.customer("Ada")
        return stores, prices, stock, customer

    def _snapshot(self, seed, stock):
        return {pair: seed.stock(*pair) for pair in stock}

    @pytest.mark.parametrize("seed_value", [7, 42, 2024])
    def test_stock_matches_ledger(self, session_factory, seed, shop, seed_value):
        stores, prices, stock, customer = shop
        rng = random.Random(seed_value)
        orders = 0

        for _ in range(self.STEPS):
            before = self._snapshot(seed, stock)
            assert before == stock
            action = rng.random()

            if action < 0.65:
                store = rng.choice(stores)
                lines = [(rng.choice(list(prices)), rng.randint(1, 4)) for _ in range(rng.randint(1, 3))]
                wanted = {}
                for product, qty in lines:
                    wanted[product] = wanted.get(product, 0) + qty
                servable = all(stock.get((p, store), -1) >= q for p, q in wanted.items())

                result = _place(session_factory, _order(store, lines, customerId=customer))

                assert result.ok == servable
                if result.ok:
                    orders += 1
                    for product, qty in wanted.items():
                        stock[(product, store)] -= qty
                    with session_factory() as s:
                        order = s.get(Order, result.value.id)
                        assert {i.product_id: i.quantity for i in order.items} == wanted
                        assert all(i.unit_price == prices[i.product_id] for i in order.items)
                        assert order.total_price == sum(i.unit_price * i.quantity for i in order.items)
                else:
                    assert result.error is ErrorKind.UNAVAILABLE

            elif action < 0.9:
                pair = rng.choice(list(stock))
                level = rng.randint(0, 8)
                with session_factory() as s:
                    repo = CatalogRepository(s)
                    svc = InventoryService(repo, ValidationService(repo))
                    result = svc.update_stock(CombinedRequest(
                        product={"id": pair[0]},
                        inventory=InventoryCreate(product={"id": pair[0]}, store={"id": pair[1]}, stockLevel=level),
                    ))
                assert result.ok
                stock[pair] = level

            else:
                product, store = rng.choice(list(stock))
                with session_factory() as s:
                    repo = CatalogRepository(s)
                    svc = InventoryService(repo, ValidationService(repo))
                    result = svc.create(InventoryCreate(product={"id": product}, store={"id": store}, stockLevel=99))
                assert result.error is ErrorKind.CONFLICT

            assert self._snapshot(seed, stock) == stock
            assert seed.count(Order) == orders
            assert seed.count(Inventory) == len(stock)
            assert seed.count(Customer) == 1
            assert all(level >= 0 for level in stock.values())
