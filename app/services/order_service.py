# app/services/order_service.py
from typing import List

from app.domain.schemas import OrderOut
from app.repos.document_store import DocumentStore
from app.repos.order_repo import OrderRepo


class OrderService:
    """
    Odczyt zamówień sprzedawcy (Query).
    Zamowienia powstaja tylko w checkoucie.
    """

    def __init__(self, store: DocumentStore):
        self.repo = OrderRepo(store)

    def list_orders(self, seller_id: str, limit: int | None = None) -> List[OrderOut]:
        return [OrderOut.model_validate(o) for o in self.repo.list_orders(seller_id, limit=limit)]

    def get_order(self, seller_id: str, order_id: str) -> OrderOut:
        order = self.repo.get_order(seller_id, order_id)

        if not order:
            raise ValueError("Zamówienie nie istnieje")

        return OrderOut.model_validate(order)
