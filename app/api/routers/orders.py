# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import get_store, require_user
from app.domain.schemas import BuyerIdentity, OrderOut
from app.repos.document_store import DocumentStore
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(store: DocumentStore):
    return OrderService(store)


@router.get("/", response_model=List[OrderOut])
def list_orders(
    limit: int | None = Query(None, gt=0),
    user: BuyerIdentity = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    """
    Zamówienia zalogowanego rolnika, najnowsze pierwsze.
    """
    svc = get_service(store)
    return svc.list_orders(user.uid, limit=limit)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    user: BuyerIdentity = Depends(require_user),
    store: DocumentStore = Depends(get_store),
):
    svc = get_service(store)
    try:
        return svc.get_order(user.uid, order_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
