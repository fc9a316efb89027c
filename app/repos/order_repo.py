# app/repos/order_repo.py
from typing import Any, Dict, List

from app.repos.document_store import DocumentStore, DocumentRef


class OrderRepo:
    """Zamowienia sprzedawcy: users/<seller_id>/orders"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def orders_ref(self, seller_id: str):
        return self.store.collection("users", seller_id, "orders")

    def new_order_ref(self, seller_id: str) -> DocumentRef:
        return self.orders_ref(seller_id).document()

    def get_order(self, seller_id: str, order_id: str) -> Dict[str, Any] | None:
        return self.store.get(self.orders_ref(seller_id).document(order_id))

    def list_orders(self, seller_id: str, limit: int | None = None) -> List[Dict[str, Any]]:
        return self.store.query(
            self.orders_ref(seller_id),
            order_by="orderDate",
            descending=True,
            limit=limit,
        )
