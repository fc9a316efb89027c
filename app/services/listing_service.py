# app/services/listing_service.py
from typing import Any, Dict, List

from app.domain.schemas import BuyerIdentity, ListingIn, ListingOut
from app.i18n import crop_image_id
from app.repos.document_store import DocumentStore
from app.repos.listing_repo import ListingRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ListingService:
    """
    Oferty upraw rolnika: dodanie, edycja, lista wlasnych, usuniecie.
    Zmieniac i usuwac moze tylko wlasciciel (userId).
    """

    def __init__(self, store: DocumentStore):
        self.repo = ListingRepo(store)

    def _values(self, payload: ListingIn) -> Dict[str, Any]:
        data = payload.model_dump(by_alias=True)
        if not data.get("imageUrl") and not data.get("imageId"):
            data["imageId"] = crop_image_id(payload.crop_name)
        return data

    def _owned(self, farmer: BuyerIdentity, listing_id: str) -> Dict[str, Any]:
        listing = self.repo.get_listing(listing_id)

        if not listing:
            raise ValueError("Oferta nie istnieje")

        if listing.get("userId") != farmer.uid:
            raise PermissionError("Oferta nalezy do innego rolnika")

        return listing

    def create_listing(self, farmer: BuyerIdentity, payload: ListingIn) -> ListingOut:
        ref = self.repo.create(farmer.uid, self._values(payload))
        logger.info(f"Rolnik {farmer.uid} dodal oferte {ref.id} ({payload.crop_name})")
        return self.get_listing(ref.id)

    def update_listing(self, farmer: BuyerIdentity, listing_id: str, payload: ListingIn) -> ListingOut:
        listing = self._owned(farmer, listing_id)
        listing.pop("id")

        self.repo.update(listing_id, {**listing, **self._values(payload)})
        logger.info(f"Rolnik {farmer.uid} zmienil oferte {listing_id}")
        return self.get_listing(listing_id)

    def delete_listing(self, farmer: BuyerIdentity, listing_id: str) -> None:
        self._owned(farmer, listing_id)
        self.repo.delete(listing_id)
        logger.info(f"Rolnik {farmer.uid} usunal oferte {listing_id}")

    def get_listing(self, listing_id: str) -> ListingOut:
        listing = self.repo.get_listing(listing_id)

        if not listing:
            raise ValueError("Oferta nie istnieje")

        return ListingOut.model_validate(listing)

    def list_listings(self, farmer_id: str) -> List[ListingOut]:
        return [ListingOut.model_validate(l) for l in self.repo.list_for_farmer(farmer_id)]
