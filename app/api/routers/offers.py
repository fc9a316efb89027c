# app/api/routers/offers.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_store, require_user
from app.domain.schemas import BuyerIdentity, OfferIn, OfferOut, OfferStatusIn
from app.repos.document_store import DocumentStore
from app.services.offer_service import OfferDecidedError, OfferService

router = APIRouter(prefix="/offers", tags=["offers"])


def get_service(store: DocumentStore):
    return OfferService(store)


@router.post("/", response_model=OfferOut)
def make_offer(
    payload: OfferIn,
    user: BuyerIdentity = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    svc = get_service(store)
    try:
        return svc.make_offer(user, payload)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.get("/received", response_model=List[OfferOut])
def received_offers(
    user: BuyerIdentity = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    """Oferty na uprawy zalogowanego rolnika."""
    return get_service(store).received(user.uid)


@router.get("/made", response_model=List[OfferOut])
def made_offers(
    user: BuyerIdentity = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    """Oferty zlozone przez zalogowanego kupujacego."""
    return get_service(store).made(user.uid)


@router.patch("/{offer_id}", response_model=OfferOut)
def update_offer_status(
    offer_id: str,
    payload: OfferStatusIn,
    user: BuyerIdentity = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    svc = get_service(store)
    try:
        return svc.update_status(user, offer_id, payload.status)
    except OfferDecidedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
