# app/services/offer_service.py
from typing import List

from app.domain.schemas import (
    BUYER_OFFERS_LINK,
    NEW_OFFER_KEY,
    OFFER_STATUS_KEY,
    OFFER_STATUS_PENDING,
    BuyerIdentity,
    NewOfferPayload,
    NotificationRecord,
    OfferIn,
    OfferOut,
    OfferRecord,
    OfferStatusPayload,
)
from app.repos.document_store import DocumentStore, SERVER_TIMESTAMP
from app.repos.listing_repo import ListingRepo
from app.repos.notification_repo import NotificationRepo
from app.repos.offer_repo import OfferRepo
from app.services.checkout_service import buyer_display_name
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OfferDecidedError(ValueError):
    """Oferta zostala juz przyjeta albo odrzucona."""


class OfferService:
    """
    Oferty hurtowe.

    - kupujacy sklada oferte na uprawe rolnika -> powiadomienie rolnika
    - rolnik przyjmuje/odrzuca oferte -> powiadomienie kupujacego
    Oferta i powiadomienie zapisywane jednym batchem.
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self.offers = OfferRepo(store)
        self.listings = ListingRepo(store)
        self.notifications = NotificationRepo(store)

    def make_offer(self, buyer: BuyerIdentity, payload: OfferIn) -> OfferOut:
        listing = self.listings.get_listing(payload.crop_listing_id)

        if not listing or not listing.get("userId"):
            raise ValueError("Oferta uprawy nie istnieje")

        farmer_id = listing["userId"]
        if farmer_id == buyer.uid:
            raise PermissionError("Nie mozna skladac oferty na wlasna uprawe")

        offer_price = payload.offer_price
        if offer_price is None:
            offer_price = listing.get("wholesalePrice") or 0

        buyer_name = buyer_display_name(buyer)
        offer = OfferRecord(
            crop_listing_id=listing["id"],
            farmer_id=farmer_id,
            buyer_id=buyer.uid,
            buyer_name=buyer_name,
            crop_name=listing["cropName"],
            quantity=payload.quantity,
            unit=listing.get("unit"),
            offer_price=offer_price,
        )
        notification = NotificationRecord(
            user_id=farmer_id,
            message_key=NEW_OFFER_KEY,
            message_payload=NewOfferPayload(buyer_name=buyer_name, crop_name=listing["cropName"]),
        )

        offer_ref = self.offers.offer_ref()
        batch = self.store.batch()
        batch.set(offer_ref, {**offer.model_dump(by_alias=True), "createdAt": SERVER_TIMESTAMP})
        batch.set(
            self.notifications.new_notification_ref(farmer_id),
            {**notification.model_dump(by_alias=True), "createdAt": SERVER_TIMESTAMP},
        )
        batch.commit()

        logger.info(
            f"Kupujacy {buyer.uid} zlozyl oferte {offer_ref.id} na {listing['id']}: "
            f"{payload.quantity} x {offer_price}"
        )
        return self.get_offer(offer_ref.id)

    def update_status(self, farmer: BuyerIdentity, offer_id: str, status: str) -> OfferOut:
        offer = self.offers.get_offer(offer_id)

        if not offer:
            raise ValueError("Oferta nie istnieje")

        if offer.get("farmerId") != farmer.uid:
            raise PermissionError("Oferta dotyczy uprawy innego rolnika")

        if offer.get("status") != OFFER_STATUS_PENDING:
            raise OfferDecidedError(f"Oferta ma juz status {offer.get('status')}")

        offer_id = offer.pop("id")
        notification = NotificationRecord(
            user_id=offer["buyerId"],
            message_key=OFFER_STATUS_KEY,
            message_payload=OfferStatusPayload(crop_name=offer["cropName"], status=status),
            link=BUYER_OFFERS_LINK,
        )

        batch = self.store.batch()
        batch.set(self.offers.offer_ref(offer_id), {**offer, "status": status})
        batch.set(
            self.notifications.new_notification_ref(offer["buyerId"]),
            {**notification.model_dump(by_alias=True), "createdAt": SERVER_TIMESTAMP},
        )
        batch.commit()

        logger.info(f"Rolnik {farmer.uid}: oferta {offer_id} -> {status}")
        return self.get_offer(offer_id)

    def get_offer(self, offer_id: str) -> OfferOut:
        offer = self.offers.get_offer(offer_id)

        if not offer:
            raise ValueError("Oferta nie istnieje")

        return OfferOut.model_validate(offer)

    def received(self, farmer_id: str) -> List[OfferOut]:
        return [OfferOut.model_validate(o) for o in self.offers.list_for_farmer(farmer_id)]

    def made(self, buyer_id: str) -> List[OfferOut]:
        return [OfferOut.model_validate(o) for o in self.offers.list_for_buyer(buyer_id)]
