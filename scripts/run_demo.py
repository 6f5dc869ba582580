#!/usr/bin/env python3
"""
run_demo.py - End-to-end demo against a running retailhub instance
- Creates a store and a product, stocks it, updates the stock level
- Places an order, then tries to oversell
- Fires two competing orders at once
- Filters the store catalog with "null" sentinels
- Removes the product and shows the inventory is gone
"""

import argparse
import json
import threading
import uuid
from typing import Any, Dict, List, Optional

import httpx


class DemoRunner:
    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(base_url=self.base_url, timeout=30.0)
        # unique suffix so the demo can be re-run against the same database
        self.tag = uuid.uuid4().hex[:6]

    # ---------- helpers ----------
    def show_step(self, title: str):
        print(f"\n=== {title} ===")

    def call_api(
        self,
        method: str,
        path: str,
        data: Optional[Any] = None,
        params: Optional[Dict] = None,
        quiet: bool = False,
    ) -> Dict[str, Any]:
        if not quiet:
            print(f"\n-> {method} {path}")
            if data is not None:
                print(f"   Body: {json.dumps(data, indent=2)}")
        try:
            resp = self.client.request(method, path, json=data, params=params)
        except httpx.RequestError as e:
            print(f"   Error: \033[91m{e}\033[0m")
            return {"status": None, "data": None, "error": str(e)}

        try:
            js = resp.json()
        except json.JSONDecodeError:
            js = None
        if not quiet:
            color = "\033[92m" if resp.status_code < 400 else "\033[93m"
            print(f"   Status: {color}{resp.status_code}\033[0m  X-Request-ID: {resp.headers.get('X-Request-ID')}")
            print(f"   JSON: {json.dumps(js)}")
        return {"status": resp.status_code, "data": js}

    def order_body(self, store_id: int, product_id: int, qty: int, name: str) -> Dict[str, Any]:
        return {"storeId": store_id, "customerName": name, "items": [{"productId": product_id, "quantity": qty}]}

    # ---------- flow ----------
    def run_demo(self):
        print("Starting retail catalog demo")
        print("=" * 50)

        health = self.call_api("GET", "/health", quiet=True)
        if health.get("status") != 200:
            print(f"\033[91mService not reachable at {self.base_url}\033[0m")
            return

        self.show_step("1) Create store")
        res = self.call_api("POST", "/store", data={"name": f"Demo Store {self.tag}", "address": "1 Demo Street"})
        store_id = int(res["data"]["message"].rsplit(" ", 1)[1])

        self.show_step("Create product")
        sku = f"DEMO-{self.tag}"
        self.call_api("POST", "/product", data={"name": f"Apple {self.tag}", "category": "Fruit", "price": 1.25, "sku": sku})
        products: List[Dict] = self.call_api("GET", "/product", quiet=True)["data"]["products"]
        product_id = next(p["id"] for p in products if p["sku"] == sku)

        self.show_step("2) Create inventory, then update")
        inv = {"product": {"id": product_id}, "store": {"id": store_id}, "stockLevel": 10}
        self.call_api("POST", "/inventory", data=inv)
        self.call_api("POST", "/inventory", data=inv)
        self.call_api("PUT", "/inventory", data={"product": {"id": product_id}, "inventory": {**inv, "stockLevel": 4}})
        self.call_api("GET", f"/inventory/validate/4/{store_id}/{product_id}")
        self.call_api("GET", f"/inventory/validate/5/{store_id}/{product_id}")

        self.show_step("3) Place order for 3")
        self.call_api("POST", "/store/placeOrder", data=self.order_body(store_id, product_id, 3, "Ada"))
        self.call_api("GET", f"/inventory/validate/1/{store_id}/{product_id}")
        self.call_api("GET", f"/inventory/validate/2/{store_id}/{product_id}")

        self.show_step("4) Oversell is rejected")
        self.call_api("POST", "/store/placeOrder", data=self.order_body(store_id, product_id, 2, "Ada"))

        self.show_step("5) Two competing orders of 3 against stock 4")
        self.call_api("PUT", "/inventory", data={"product": {"id": product_id}, "inventory": {**inv, "stockLevel": 4}})
        outcomes: List[Dict] = []
        barrier = threading.Barrier(2)

        def worker(name: str):
            barrier.wait()
            outcomes.append(self.call_api("POST", "/store/placeOrder", data=self.order_body(store_id, product_id, 3, name), quiet=True))

        threads = [threading.Thread(target=worker, args=(n,)) for n in ("Grace", "Linus")]
        for t in threads: t.start()
        for t in threads: t.join()
        for o in outcomes:
            print(f"   {json.dumps(o['data'])}")

        self.show_step("7) Filter sentinels")
        self.call_api("GET", f"/inventory/filter/null/Apple/{store_id}")
        self.call_api("GET", f"/inventory/filter/Fruit/null/{store_id}")
        self.call_api("GET", "/inventory/filter", params={"storeId": store_id, "category": "Fruit"})

        self.show_step("6) Cascade delete")
        self.call_api("DELETE", f"/inventory/{product_id}")
        self.call_api("GET", f"/inventory/{store_id}")

        print("\nDemo complete.")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--base-url", default="http://localhost:8000")
    args = ap.parse_args()
    DemoRunner(args.base_url).run_demo()


if __name__ == "__main__":
    main()
