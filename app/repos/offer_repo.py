# app/repos/offer_repo.py
from typing import Any, Dict, List

from app.repos.document_store import DocumentStore, DocumentRef


class OfferRepo:
    """Oferty hurtowe kupujacych, kolekcja offers (wspolna dla rolnikow i kupujacych)"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def offers_ref(self):
        return self.store.collection("offers")

    def offer_ref(self, offer_id: str | None = None) -> DocumentRef:
        return self.offers_ref().document(offer_id)

    def get_offer(self, offer_id: str) -> Dict[str, Any] | None:
        return self.store.get(self.offer_ref(offer_id))

    def list_for_farmer(self, farmer_id: str) -> List[Dict[str, Any]]:
        return self._list("farmerId", farmer_id)

    def list_for_buyer(self, buyer_id: str) -> List[Dict[str, Any]]:
        return self._list("buyerId", buyer_id)

    def _list(self, field: str, user_id: str) -> List[Dict[str, Any]]:
        return self.store.query(
            self.offers_ref(),
            where={field: user_id},
            order_by="createdAt",
            descending=True,
        )
