# app/services/checkout_service.py
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from app.domain.schemas import (
    ANONYMOUS_BUYER,
    BuyerIdentity,
    CartItem,
    CheckoutResult,
    NewOrderPayload,
    NotificationItem,
    NotificationRecord,
    OrderItemSnapshot,
    OrderRecord,
    SellerCheckoutResult,
)
from app.repos.document_store import DocumentStore, SERVER_TIMESTAMP
from app.repos.notification_repo import NotificationRepo
from app.repos.order_repo import OrderRepo
from app.services.cart_service import CartSession
from app.utils.logging import get_logger

logger = get_logger(__name__)

CHECKOUT_SUCCESS_KEY = "cart.checkoutSuccessDescription"
SHOP_CHECKOUT_SUCCESS_KEY = "cart.shopCheckoutSuccessDescription"
CHECKOUT_FAILED_KEY = "cart.checkoutFailedDescription"
AUTH_ERROR_KEY = "marketplace.authErrorDescription"
CART_UNAVAILABLE_KEY = "cart.unavailableDescription"


class CheckoutAuthError(PermissionError):
    """Brak kupujacego albo magazynu - nic nie zostalo zapisane."""


class CartUnavailableError(RuntimeError):
    """Koszyk nie zostal wczytany z repo - checkout nie wie co w nim jest."""


class CheckoutFailedError(RuntimeError):
    """
    Batch jednego ze sprzedawcow sie nie powiodl.
    committed - sprzedawcy zapisani wczesniej w tym checkoucie, NIE sa wycofywani
    """

    def __init__(self, seller_id: str, committed: List[SellerCheckoutResult]):
        super().__init__(f"Checkout nie powiodl sie dla sprzedawcy {seller_id}")
        self.seller_id = seller_id
        self.committed = list(committed)


#czyste funkcje, bez I/O

def partition_cart(items: Iterable[CartItem]) -> Tuple[List[CartItem], List[CartItem]]:
    """Dzieli koszyk na pozycje sprzedawcow (z userId) i pozycje sklepu (bez)."""
    seller_items: List[CartItem] = []
    shop_items: List[CartItem] = []

    for item in items:
        if item.user_id:
            seller_items.append(item)
        else:
            shop_items.append(item)

    return seller_items, shop_items


def group_by_seller(items: Iterable[CartItem]) -> Dict[str, List[CartItem]]:
    """Grupy w kolejnosci pierwszego wystapienia sprzedawcy w koszyku."""
    groups: Dict[str, List[CartItem]] = {}
    for item in items:
        groups.setdefault(item.user_id, []).append(item)
    return groups


def seller_total(items: Iterable[CartItem]) -> Decimal:
    return sum((Decimal(str(i.price)) * i.quantity for i in items), Decimal("0.00"))


def buyer_display_name(buyer: BuyerIdentity) -> str:
    return buyer.display_name or ANONYMOUS_BUYER


def build_order(seller_id: str, buyer: BuyerIdentity, items: List[CartItem]) -> OrderRecord:
    return OrderRecord(
        user_id=seller_id,
        buyer_id=buyer.uid,
        buyer_name=buyer_display_name(buyer),
        total_amount=float(seller_total(items)),
        items=[
            OrderItemSnapshot(
                id=i.id,
                name=i.name,
                quantity=i.quantity,
                price=i.price,
                unit=i.unit or None,
                is_sample=bool(i.is_sample),
                image_id=i.image_id or None,
                image_url=i.image_url or None,
            )
            for i in items
        ],
    )


def build_notification(seller_id: str, buyer: BuyerIdentity, items: List[CartItem]) -> NotificationRecord:
    return NotificationRecord(
        user_id=seller_id,
        message_payload=NewOrderPayload(
            buyer_name=buyer_display_name(buyer),
            items=[
                NotificationItem(name=i.name, quantity=i.quantity, is_sample=bool(i.is_sample))
                for i in items
            ],
        ),
    )


class CheckoutService:
    """
    Checkout koszyka z wieloma sprzedawcami.

    1. pozycje sklepu (bez userId) - bez zapisu, tylko znikaja z koszyka
    2. pozycje rolnikow grupowane po userId
    3. dla kazdego sprzedawcy po kolei jeden atomowy batch: zamowienie + powiadomienie
    4. blad batcha przerywa checkout, koszyk zostaje, wczesniejsze batche NIE sa wycofywane
    """

    def __init__(self, store: DocumentStore | None, notification_service=None):
        self.store = store
        self.notification_service = notification_service

    def checkout(self, cart: CartSession, buyer: BuyerIdentity | None) -> CheckoutResult:
        if buyer is None or self.store is None:
            raise CheckoutAuthError("Brak zalogowanego uzytkownika lub polaczenia z magazynem")

        if cart.load_failed:
            raise CartUnavailableError(f"Koszyk {cart.session_id} nie zostal wczytany")

        #koszyk czytany raz, na starcie
        seller_items, shop_items = partition_cart(cart.items)
        groups = group_by_seller(seller_items)

        logger.info(
            f"Checkout kupujacego {buyer.uid}: {len(groups)} sprzedawcow, "
            f"{len(shop_items)} pozycji sklepu"
        )

        committed: List[SellerCheckoutResult] = []

        for seller_id, items in groups.items():
            if not items:
                continue

            try:
                result = self._commit_seller_group(seller_id, buyer, items)
            except Exception as e:
                logger.exception(
                    f"Checkout failed for seller {seller_id} "
                    f"({len(committed)} seller group(s) already committed): {e}"
                )
                raise CheckoutFailedError(seller_id, committed) from e

            committed.append(result)
            self._announce(result)

        cart.clear()

        if committed:
            status, message_key = "marketplace", CHECKOUT_SUCCESS_KEY
        elif shop_items:
            status, message_key = "shop_only", SHOP_CHECKOUT_SUCCESS_KEY
        else:
            status, message_key = "empty", None

        return CheckoutResult(
            status=status,
            sellers=committed,
            shop_item_count=len(shop_items),
            message_key=message_key,
        )

    def _commit_seller_group(
        self,
        seller_id: str,
        buyer: BuyerIdentity,
        items: List[CartItem],
    ) -> SellerCheckoutResult:
        order = build_order(seller_id, buyer, items)
        notification = build_notification(seller_id, buyer, items)

        order_ref = OrderRepo(self.store).new_order_ref(seller_id)
        notification_ref = NotificationRepo(self.store).new_notification_ref(seller_id)

        batch = self.store.batch()
        batch.set(order_ref, {**order.model_dump(by_alias=True), "orderDate": SERVER_TIMESTAMP})
        batch.set(
            notification_ref,
            {**notification.model_dump(by_alias=True), "createdAt": SERVER_TIMESTAMP},
        )
        batch.commit()

        logger.info(
            f"Order {order_ref.id} for seller {seller_id} committed, total {order.total_amount}"
        )

        return SellerCheckoutResult(
            seller_id=seller_id,
            order_id=order_ref.id,
            notification_id=notification_ref.id,
            total_amount=order.total_amount,
            item_count=len(items),
        )

    def _announce(self, result: SellerCheckoutResult) -> None:
        if not self.notification_service:
            return

        #zamowienie juz zapisane, blad wysylki nie psuje checkoutu
        try:
            self.notification_service.announce_order(result.seller_id, result.order_id)
        except Exception as e:
            logger.warning(f"Failed to announce order {result.order_id}: {e}")
