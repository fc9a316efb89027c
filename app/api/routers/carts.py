#app/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import (
    get_cart_session,
    get_current_user,
    get_notification_service,
    get_product_client,
    get_store,
    get_translator,
)
from app.domain.schemas import (
    AddItemIn,
    BuyerIdentity,
    CartOut,
    CheckoutErrorOut,
    CheckoutResult,
    QuantityIn,
    ShopItemIn,
)
from app.i18n import Translator
from app.repos.document_store import DocumentStore
from app.repos.listing_repo import ListingRepo
from app.services.cart_service import CartService, CartSession
from app.services.checkout_service import (
    AUTH_ERROR_KEY,
    CART_UNAVAILABLE_KEY,
    CHECKOUT_FAILED_KEY,
    CartUnavailableError,
    CheckoutAuthError,
    CheckoutFailedError,
    CheckoutService,
)
from app.services.notification_service import NotificationService
from app.services.product_client import ProductClient

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(cart: CartSession, product_client: ProductClient, store: DocumentStore):
    return CartService(
        cart=cart,
        product_client=product_client,
        listing_repo=ListingRepo(store),
    )


@router.get("/", response_model=CartOut)
def get_cart(cart: CartSession = Depends(get_cart_session)):
    return cart.to_dict()


@router.post("/items", response_model=CartOut)
def add_item(payload: AddItemIn, cart: CartSession = Depends(get_cart_session)):
    try:
        cart.add_item(payload, payload.quantity)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return cart.to_dict()


@router.post("/shop-items", response_model=CartOut)
def add_shop_item(
    payload: ShopItemIn,
    cart: CartSession = Depends(get_cart_session),
    product_client: ProductClient = Depends(get_product_client),
    store: DocumentStore = Depends(get_store),
):
    svc = get_service(cart, product_client, store)
    try:
        svc.add_shop_product(payload.product_id, payload.quantity)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return cart.to_dict()


@router.post("/listings/{listing_id}", response_model=CartOut)
def add_listing(
    listing_id: str,
    payload: QuantityIn,
    cart: CartSession = Depends(get_cart_session),
    product_client: ProductClient = Depends(get_product_client),
    store: DocumentStore = Depends(get_store),
):
    svc = get_service(cart, product_client, store)
    try:
        svc.add_listing(listing_id, payload.quantity)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return cart.to_dict()


@router.post("/listings/{listing_id}/sample", response_model=CartOut)
def request_sample(
    listing_id: str,
    cart: CartSession = Depends(get_cart_session),
    product_client: ProductClient = Depends(get_product_client),
    store: DocumentStore = Depends(get_store),
):
    svc = get_service(cart, product_client, store)
    try:
        svc.request_sample(listing_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return cart.to_dict()


@router.patch("/items/{item_id}", response_model=CartOut)
def update_item(item_id: str, payload: QuantityIn, cart: CartSession = Depends(get_cart_session)):
    cart.update_item_quantity(item_id, payload.quantity)
    return cart.to_dict()


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(item_id: str, cart: CartSession = Depends(get_cart_session)):
    cart.remove_item(item_id)
    return cart.to_dict()


@router.delete("/", response_model=CartOut)
def clear_cart(cart: CartSession = Depends(get_cart_session)):
    cart.clear()
    return cart.to_dict()


@router.post(
    "/checkout",
    response_model=CheckoutResult,
    responses={
        401: {"model": CheckoutErrorOut},
        502: {"model": CheckoutErrorOut},
        503: {"model": CheckoutErrorOut},
    },
)
def checkout(
    cart: CartSession = Depends(get_cart_session),
    buyer: BuyerIdentity | None = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
    notifications: NotificationService = Depends(get_notification_service),
    t: Translator = Depends(get_translator),
):
    """
    Checkout calego koszyka: jedno zamowienie + powiadomienie na rolnika.
    Przy bledzie koszyk zostaje nietkniety.
    """
    svc = CheckoutService(store, notification_service=notifications)
    try:
        return svc.checkout(cart, buyer)
    except CheckoutAuthError:
        raise HTTPException(
            status_code=401,
            detail=CheckoutErrorOut(
                message_key=AUTH_ERROR_KEY,
                message=t(AUTH_ERROR_KEY),
            ).model_dump(),
        )
    except CartUnavailableError:
        raise HTTPException(
            status_code=503,
            detail=CheckoutErrorOut(
                message_key=CART_UNAVAILABLE_KEY,
                message=t(CART_UNAVAILABLE_KEY),
            ).model_dump(),
        )
    except CheckoutFailedError as e:
        raise HTTPException(
            status_code=502,
            detail=CheckoutErrorOut(
                message_key=CHECKOUT_FAILED_KEY,
                message=t(CHECKOUT_FAILED_KEY),
                failed_seller_id=e.seller_id,
                committed_sellers=e.committed,
            ).model_dump(),
        )
