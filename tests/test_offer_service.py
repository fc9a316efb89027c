import pytest

from app.domain.schemas import BuyerIdentity, ListingIn, OfferIn
from app.repos.notification_repo import NotificationRepo
from app.repos.offer_repo import OfferRepo
from app.services.listing_service import ListingService
from app.services.offer_service import OfferDecidedError, OfferService
from tests.conftest import FlakyStore


FARMER = BuyerIdentity(uid="farmer-1", display_name="Ramesh")


@pytest.fixture
def listing(store):
    return ListingService(store).create_listing(
        FARMER,
        ListingIn(crop_name="Organic Wheat", wholesale_price=0.8, unit="kg"),
    )


def test_make_offer_writes_offer_and_farmer_notification(store, buyer, listing):
    offer = OfferService(store).make_offer(
        buyer, OfferIn(crop_listing_id=listing.id, quantity=500, offer_price=0.75)
    )

    stored = OfferRepo(store).get_offer(offer.id)
    assert stored["cropListingId"] == listing.id
    assert stored["farmerId"] == "farmer-1"
    assert stored["buyerId"] == "buyer-1"
    assert stored["buyerName"] == "Asha"
    assert stored["cropName"] == "Organic Wheat"
    assert stored["quantity"] == 500
    assert stored["unit"] == "kg"
    assert stored["offerPrice"] == 0.75
    assert stored["status"] == "pending"
    assert stored["createdAt"]

    note = NotificationRepo(store).latest("farmer-1")[0]
    assert note["messageKey"] == "notifications.newOfferReceived"
    assert note["messagePayload"] == {"buyerName": "Asha", "cropName": "Organic Wheat"}
    assert note["link"] == "/dashboard"
    assert note["read"] is False
    assert note["createdAt"] == stored["createdAt"]


def test_offer_price_defaults_to_wholesale_price(store, listing):
    offer = OfferService(store).make_offer(
        BuyerIdentity(uid="b2"), OfferIn(crop_listing_id=listing.id, quantity=1)
    )

    assert offer.offer_price == 0.8
    assert offer.buyer_name == "anonymous_buyer"


def test_failed_offer_batch_writes_nothing(db, buyer, listing):
    store = FlakyStore(db, fail_on=1)

    with pytest.raises(RuntimeError):
        OfferService(store).make_offer(buyer, OfferIn(crop_listing_id=listing.id, quantity=1))

    assert OfferRepo(store).list_for_buyer("buyer-1") == []
    assert NotificationRepo(store).latest("farmer-1") == []


def test_farmer_cannot_offer_on_own_listing(store, listing):
    with pytest.raises(PermissionError):
        OfferService(store).make_offer(FARMER, OfferIn(crop_listing_id=listing.id, quantity=1))


@pytest.mark.parametrize("status", ["accepted", "rejected"])
def test_farmer_decision_notifies_buyer(store, buyer, listing, status):
    svc = OfferService(store)
    offer = svc.make_offer(buyer, OfferIn(crop_listing_id=listing.id, quantity=10))

    updated = svc.update_status(FARMER, offer.id, status)

    assert updated.status == status
    assert updated.offer_price == offer.offer_price
    note = NotificationRepo(store).latest("buyer-1")[0]
    assert note["messageKey"] == "dashboard.offerStatusUpdate"
    assert note["messagePayload"] == {"cropName": "Organic Wheat", "status": status}
    assert note["link"] == "/dashboard/my-offers"

    with pytest.raises(OfferDecidedError):
        svc.update_status(FARMER, offer.id, "accepted")


def test_only_listing_farmer_decides(store, buyer, listing):
    svc = OfferService(store)
    offer = svc.make_offer(buyer, OfferIn(crop_listing_id=listing.id, quantity=10))

    with pytest.raises(PermissionError):
        svc.update_status(buyer, offer.id, "accepted")

    assert svc.get_offer(offer.id).status == "pending"
    assert NotificationRepo(store).latest("buyer-1") == []


def test_received_and_made_are_scoped(store, buyer, listing):
    svc = OfferService(store)
    svc.make_offer(buyer, OfferIn(crop_listing_id=listing.id, quantity=1))
    svc.make_offer(buyer, OfferIn(crop_listing_id=listing.id, quantity=2))

    assert sorted(o.quantity for o in svc.received("farmer-1")) == [1, 2]
    assert len(svc.made("buyer-1")) == 2
    assert svc.made("farmer-1") == []
