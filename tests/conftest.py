import os

os.environ["DATABASE_URL"] = "sqlite://"

from unittest.mock import Mock

import pytest
from redis.exceptions import RedisError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.data.database import Base
from app.data import models  # noqa: F401  rejestracja modeli
from app.domain.schemas import BuyerIdentity, CartItemBase
from app.repos.cart_repo import CartRepo
from app.repos.document_store import DocumentStore
from app.services.cart_service import CartSession


class InMemoryCartRepo:
    """Zamiennik CartRepo bez redisa."""

    def __init__(self):
        self.data = {}
        self.saves = 0
        self.fail_load = False
        self.fail_save = False

    def load(self, session_id):
        if self.fail_load:
            raise RedisError("redis down")
        return self.data.get(CartRepo.key(session_id))

    def save(self, session_id, payload):
        if self.fail_save:
            raise RedisError("redis down")
        self.saves += 1
        self.data[CartRepo.key(session_id)] = payload

    def delete(self, session_id):
        self.data.pop(CartRepo.key(session_id), None)


class FlakyStore(DocumentStore):
    """DocumentStore ktorego n-ty batch nie przechodzi."""

    def __init__(self, db, fail_on: int):
        super().__init__(db)
        self.fail_on = fail_on
        self.batches = 0

    def batch(self):
        self.batches += 1
        batch = super().batch()
        if self.batches == self.fail_on:
            def fail():
                raise RuntimeError("store rejected batch")
            batch.commit = fail
        return batch


def make_item(item_id, price, user_id=None, **extra) -> CartItemBase:
    return CartItemBase(id=item_id, name=extra.pop("name", item_id), price=price, user_id=user_id, **extra)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return DocumentStore(db)


@pytest.fixture
def cart_repo():
    return InMemoryCartRepo()


@pytest.fixture
def cart(cart_repo):
    return CartSession(cart_repo, "session-1").load()


@pytest.fixture
def buyer():
    return BuyerIdentity(uid="buyer-1", display_name="Asha")


@pytest.fixture
def product_client():
    client = Mock()
    client.fetch_product.side_effect = lambda pid: {
        "prod-01": {"id": "prod-01", "price": 25.99, "unit": "kg", "imageId": "shop-seeds"},
    }.get(pid)
    return client
