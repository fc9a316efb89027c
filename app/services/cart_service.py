import json
from decimal import Decimal
from typing import Any, Dict, List

from redis.exceptions import RedisError

from app.domain.schemas import CartItem, CartItemBase
from app.repos.cart_repo import CartRepo
from app.repos.listing_repo import ListingRepo
from app.services.product_client import ProductClient
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartSession:
    """
    Koszyk jednej sesji uzytkownika, przekazywany jawnie (bez stanu globalnego).

    - load() czyta zapisany koszyk raz, przy inicjalizacji
    - kazda zmiana po load() zapisuje caly koszyk do repo
    - pozycje unikalne po id, ponowne dodanie zwieksza ilosc
    - gdy repo bylo niedostepne przy load(), koszyk nic nie zapisuje (load_failed)
    """

    def __init__(self, repo: CartRepo, session_id: str):
        self.repo = repo
        self.session_id = session_id
        self._items: List[CartItem] = []
        self._loaded = False
        self._load_failed = False

    def load(self) -> "CartSession":
        try:
            raw = self.repo.load(self.session_id)
        except RedisError as e:
            #zapisany koszyk nieznany -> bez zapisu, zeby go nie nadpisac
            logger.error(f"Repo koszyka niedostepne, koszyk {self.session_id} tylko do odczytu: {e}")
            self._items = []
            self._load_failed = True
            return self

        try:
            if raw:
                self._items = [CartItem.model_validate(i) for i in json.loads(raw)]
        except (ValueError, TypeError) as e:
            #uszkodzony koszyk -> zaczynamy od pustego
            logger.error(f"Uszkodzony koszyk {self.session_id}: {e}")
            self._items = []

        self._loaded = True
        return self

    @property
    def load_failed(self) -> bool:
        return self._load_failed

    def _persist(self) -> None:
        if not self._loaded:
            if self._load_failed:
                logger.warning(f"Koszyk {self.session_id} nie zostal wczytany, zmiana tylko w pamieci")
            return

        payload = json.dumps([i.model_dump(by_alias=True) for i in self._items])
        try:
            self.repo.save(self.session_id, payload)
        except RedisError as e:
            #stan w pamieci zostaje, zapis sprobuje sie przy nastepnej zmianie
            logger.error(f"Nie udalo sie zapisac koszyka {self.session_id}: {e}")

    #query
    @property
    def items(self) -> List[CartItem]:
        return [i.model_copy() for i in self._items]

    @property
    def count(self) -> int:
        return sum(i.quantity for i in self._items)

    @property
    def total(self) -> Decimal:
        return sum((Decimal(str(i.price)) * i.quantity for i in self._items), Decimal("0.00"))

    def __len__(self) -> int:
        return len(self._items)

    def _find(self, item_id: str) -> CartItem | None:
        return next((i for i in self._items if i.id == item_id), None)

    #commands
    def add_item(self, item: CartItemBase | Dict[str, Any], quantity: int) -> CartItem:
        if quantity <= 0:
            raise ValueError("Ilosc musi byc wieksza niz 0")

        if isinstance(item, dict):
            item = CartItemBase.model_validate(item)

        existing = self._find(item.id)

        if existing:
            logger.info(
                f"Pozycja {item.id} juz jest w koszyku, zwiekszam ilosc "
                f"z {existing.quantity} do {existing.quantity + quantity}"
            )
            existing.quantity += quantity
            added = existing
        else:
            data = item.model_dump(exclude={"quantity"})
            added = CartItem.model_validate({**data, "quantity": quantity})
            self._items.append(added)

        self._persist()
        return added.model_copy()

    def remove_item(self, item_id: str) -> None:
        self._items = [i for i in self._items if i.id != item_id]
        self._persist()

    def update_item_quantity(self, item_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(item_id)
            return

        item = self._find(item_id)
        if not item:
            logger.info(f"Pozycji {item_id} nie ma w koszyku {self.session_id}, pomijam zmiane ilosci")
            return

        item.quantity = quantity
        self._persist()

    def clear(self) -> None:
        self._items = []
        self._persist()

    def to_dict(self) -> Dict[str, Any]:
        return {"items": self.items, "count": self.count, "total": float(self.total)}


class CartService:
    """
    Use case'y dodawania do koszyka z katalogu sklepu i z rynku (oferty rolnikow).
    """

    def __init__(
        self,
        cart: CartSession,
        product_client: ProductClient | None = None,
        listing_repo: ListingRepo | None = None,
    ):
        self.cart = cart
        self.product_client = product_client
        self.listing_repo = listing_repo

    def add_shop_product(self, product_id: str, quantity: int) -> CartItem:
        logger.info(f"Pobieranie danych produktu {product_id} z product-service")
        pdata = self.product_client.fetch_product(product_id)

        if not pdata:
            raise ValueError("Produkt nie istnieje")

        #produkty sklepu: name = id produktu (nazwa tlumaczona z products.<id>.name), bez sprzedawcy
        item = CartItemBase(
            id=pdata["id"],
            name=pdata["id"],
            price=pdata["price"],
            unit=pdata.get("unit"),
            image_id=pdata.get("imageId"),
            image_url=pdata.get("imageUrl"),
            is_sample=False,
        )
        return self.cart.add_item(item, quantity)

    def _get_listing(self, listing_id: str) -> Dict[str, Any]:
        listing = self.listing_repo.get_listing(listing_id)

        if not listing:
            raise ValueError("Oferta nie istnieje")

        if not listing.get("userId"):
            raise ValueError("Oferta nie ma przypisanego rolnika")

        return listing

    def add_listing(self, listing_id: str, quantity: int) -> CartItem:
        listing = self._get_listing(listing_id)

        item = CartItemBase(
            id=listing["id"],
            name=listing["cropName"],
            price=listing["retailPrice"],
            unit=listing.get("unit"),
            user_id=listing["userId"],
            image_id=listing.get("imageId"),
            image_url=listing.get("imageUrl"),
            is_sample=False,
        )
        return self.cart.add_item(item, quantity)

    def request_sample(self, listing_id: str) -> CartItem:
        listing = self._get_listing(listing_id)

        if not listing.get("hasSampleBag"):
            raise ValueError("Rolnik nie oferuje probki tej uprawy")

        #darmowa probka to osobna pozycja: <id>-sample, cena 0
        item = CartItemBase(
            id=f"{listing['id']}-sample",
            name=listing["cropName"],
            price=0,
            unit=listing.get("unit"),
            user_id=listing["userId"],
            image_id=listing.get("imageId"),
            image_url=listing.get("imageUrl"),
            is_sample=True,
        )
        return self.cart.add_item(item, 1)
