# どこで: `src/metascan/demos/services.py`。
# 何を: ユーザー定義 kind を付与したデモ用サービス（OrderService/ProductService）を定義する。
# なぜ: custom_kinds デモの scan 対象として固定の入力を用意するため。

from __future__ import annotations

from .kinds import Action, DeprecatedFeature, Service


@Service(name="OrderService")
class OrderService:
    @Action(description="Processes the order", priority=2)
    def process_order(self) -> None:
        print("Processing order...")

    @Action(description="Cancels the order")
    @DeprecatedFeature(reason="This feature is obsolete", alternative="Use cancel_order_v2()")
    def cancel_order(self) -> None:
        print("Cancelling order...")


@Service(name="ProductService")
class ProductService:
    def manage_inventory(self) -> None:
        print("Managing inventory...")


__all__ = ["OrderService", "ProductService"]
