# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Literal
from datetime import datetime


ANONYMOUS_BUYER = "anonymous_buyer"
ORDER_STATUS_PROCESSING = "Processing"

NEW_ORDER_KEY = "notifications.newOrder"
NEW_OFFER_KEY = "notifications.newOfferReceived"
OFFER_STATUS_KEY = "dashboard.offerStatusUpdate"

SELLER_DASHBOARD_LINK = "/dashboard"
BUYER_OFFERS_LINK = "/dashboard/my-offers"

OFFER_STATUS_PENDING = "pending"


class CamelModel(BaseModel):
    """Pola w JSON w camelCase (tak jak dokumenty w magazynie)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------- cart

class CartItemBase(CamelModel):
    id: str = Field(..., min_length=1, description="ID pozycji, unikalne w koszyku")
    name: str = Field(..., min_length=1, description="Identyfikator produktu/uprawy")
    price: float = Field(..., ge=0, description="Cena za jednostke, 0 dla probek")
    unit: str | None = None
    user_id: str | None = Field(None, description="ID sprzedawcy, brak dla sklepu")
    is_sample: bool | None = None
    image_id: str | None = None
    image_url: str | None = None


class CartItem(CartItemBase):
    """Pozycja koszyka."""

    quantity: int = Field(..., gt=0)


class AddItemIn(CartItemBase):
    """Schema dla dodawania pozycji do koszyka."""

    quantity: int = Field(1, gt=0, description="Ilosc (musi byc > 0)")


class ShopItemIn(BaseModel):
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, gt=0)


class QuantityIn(BaseModel):
    """Ilosc <= 0 usuwa pozycje."""

    quantity: int


class CartOut(BaseModel):
    items: List[CartItem]
    count: int
    total: float


# ---------------------------------------------------------------- users

class BuyerIdentity(BaseModel):
    """Tozsamosc zalogowanego kupujacego."""

    uid: str = Field(..., min_length=1)
    display_name: str | None = None


class UserCreate(BaseModel):
    """Schema dla rejestracji uzytkownika."""

    id: str = Field(..., min_length=1, max_length=128)
    display_name: str | None = Field(None, max_length=100)
    role: Literal["farmer", "buyer"] = "buyer"


class UserRead(BaseModel):
    id: str
    display_name: str | None = None
    role: str

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- orders

class OrderItemSnapshot(CamelModel):
    id: str
    name: str
    quantity: int
    price: float
    unit: str | None = None
    is_sample: bool = False
    image_id: str | None = None
    image_url: str | None = None


class OrderRecord(CamelModel):
    """Zamowienie u jednego sprzedawcy (bez orderDate - nadaje go magazyn)."""

    user_id: str
    buyer_id: str
    buyer_name: str
    total_amount: float
    status: str = ORDER_STATUS_PROCESSING
    items: List[OrderItemSnapshot]


class OrderOut(OrderRecord):
    id: str
    order_date: datetime | None = None


# ---------------------------------------------------------------- notifications

class NotificationItem(CamelModel):
    name: str
    quantity: int
    is_sample: bool = False


class NewOrderPayload(CamelModel):
    buyer_name: str
    items: List[NotificationItem]


class NewOfferPayload(CamelModel):
    buyer_name: str
    crop_name: str


class OfferStatusPayload(CamelModel):
    crop_name: str
    status: str


class NotificationRecord(CamelModel):
    """Powiadomienie uzytkownika (bez createdAt - nadaje go magazyn)."""

    user_id: str
    message_key: str = NEW_ORDER_KEY
    message_payload: NewOrderPayload | NewOfferPayload | OfferStatusPayload
    link: str = SELLER_DASHBOARD_LINK
    read: bool = False


class NotificationOut(CamelModel):
    id: str
    message: str
    message_key: str | None = None
    link: str | None = None
    read: bool = False
    created_at: datetime | None = None


# ---------------------------------------------------------------- checkout

class SellerCheckoutResult(BaseModel):
    seller_id: str
    order_id: str
    notification_id: str
    total_amount: float
    item_count: int


class CheckoutResult(BaseModel):
    status: Literal["empty", "shop_only", "marketplace"]
    sellers: List[SellerCheckoutResult] = Field(default_factory=list)
    shop_item_count: int = 0
    message_key: str | None = None


class CheckoutErrorOut(BaseModel):
    message_key: str
    message: str
    failed_seller_id: str | None = None
    committed_sellers: List[SellerCheckoutResult] = Field(default_factory=list)


# ---------------------------------------------------------------- listings

class ListingIn(CamelModel):
    """Schema dla dodawania/edycji oferty uprawy."""

    crop_name: str = Field(..., min_length=1)
    retail_price: float = Field(0, ge=0)
    wholesale_price: float = Field(0, ge=0)
    retail_quantity: int = Field(0, ge=0)
    wholesale_quantity: int = Field(0, ge=0)
    unit: str = "kg"
    quality_grade: str = "Standard"
    certifications: str | None = None
    image_id: str | None = None
    image_url: str | None = None
    has_sample_bag: bool = False


class ListingOut(ListingIn):
    id: str
    user_id: str
    created_at: datetime | None = None


# ---------------------------------------------------------------- offers

class OfferIn(CamelModel):
    """Oferta hurtowa kupujacego na uprawe rolnika."""

    crop_listing_id: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    offer_price: float | None = Field(None, ge=0, description="Brak -> cena hurtowa z oferty rolnika")


class OfferStatusIn(BaseModel):
    status: Literal["accepted", "rejected"]


class OfferRecord(CamelModel):
    crop_listing_id: str
    farmer_id: str
    buyer_id: str
    buyer_name: str
    crop_name: str
    quantity: int
    unit: str | None = None
    offer_price: float
    status: str = OFFER_STATUS_PENDING


class OfferOut(OfferRecord):
    id: str
    created_at: datetime | None = None
