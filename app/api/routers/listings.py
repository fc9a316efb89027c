# app/api/routers/listings.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_store, require_user
from app.domain.schemas import BuyerIdentity, ListingIn, ListingOut
from app.repos.document_store import DocumentStore
from app.services.listing_service import ListingService

router = APIRouter(prefix="/listings", tags=["listings"])


def get_service(store: DocumentStore):
    return ListingService(store)


@router.post("/", response_model=ListingOut)
def create_listing(
    payload: ListingIn,
    user: BuyerIdentity = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    svc = get_service(store)
    return svc.create_listing(user, payload)


@router.get("/", response_model=List[ListingOut])
def my_listings(
    user: BuyerIdentity = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    """
    Oferty zalogowanego rolnika, najnowsze pierwsze.
    """
    svc = get_service(store)
    return svc.list_listings(user.uid)


@router.get("/{listing_id}", response_model=ListingOut)
def get_listing(listing_id: str, store: DocumentStore = Depends(get_store)):
    svc = get_service(store)
    try:
        return svc.get_listing(listing_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{listing_id}", response_model=ListingOut)
def update_listing(
    listing_id: str,
    payload: ListingIn,
    user: BuyerIdentity = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    svc = get_service(store)
    try:
        return svc.update_listing(user, listing_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.delete("/{listing_id}", status_code=204)
def delete_listing(
    listing_id: str,
    user: BuyerIdentity = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    svc = get_service(store)
    try:
        svc.delete_listing(user, listing_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
