# app/repos/cart_repo.py
import redis

from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL, CART_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

#staly prefiks klucza koszyka, pelny klucz cart:<session_id>
CART_KEY = "cart"


class CartRepo:
    """
    Trwalosc koszyka w key-value store (redis).
    Caly koszyk jako jeden JSON pod kluczem sesji, TTL odnawiany przy kazdym zapisie
    """

    def __init__(self, url: str | None = None, ttl: int = CART_TTL_SECONDS):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def key(session_id: str) -> str:
        return f"{CART_KEY}:{session_id}"

    @redis_retry()
    def load(self, session_id: str) -> str | None:
        return self.redis.get(self.key(session_id))

    @redis_retry()
    def save(self, session_id: str, payload: str) -> None:
        logger.debug(f"Save cart {self.key(session_id)}")
        self.redis.set(name=self.key(session_id), value=payload, ex=self.ttl)

    @redis_retry()
    def delete(self, session_id: str) -> None:
        self.redis.delete(self.key(session_id))
