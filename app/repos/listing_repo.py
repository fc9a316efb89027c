# app/repos/listing_repo.py
from typing import Any, Dict, List

from app.repos.document_store import DocumentStore, DocumentRef, SERVER_TIMESTAMP


class ListingRepo:
    """Oferty upraw rolnikow, kolekcja cropListings"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def listings_ref(self):
        return self.store.collection("cropListings")

    def listing_ref(self, listing_id: str) -> DocumentRef:
        return self.listings_ref().document(listing_id)

    def get_listing(self, listing_id: str) -> Dict[str, Any] | None:
        return self.store.get(self.listing_ref(listing_id))

    def list_for_farmer(self, farmer_id: str) -> List[Dict[str, Any]]:
        return self.store.query(
            self.listings_ref(),
            where={"userId": farmer_id},
            order_by="createdAt",
            descending=True,
        )

    def create(self, farmer_id: str, data: Dict[str, Any]) -> DocumentRef:
        return self.store.add(
            self.listings_ref(),
            {**data, "userId": farmer_id, "createdAt": SERVER_TIMESTAMP},
        )

    def update(self, listing_id: str, data: Dict[str, Any]) -> DocumentRef:
        return self.store.set(self.listing_ref(listing_id), data)

    def delete(self, listing_id: str) -> bool:
        return self.store.delete(self.listing_ref(listing_id))
