# app/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests
import redis


def _network_retry(exc_type, base: float, max_wait: float, attempts: int = 3):
    #reraise=True -> po ostatniej probie leci oryginalny wyjatek, nie RetryError
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=base, min=base, max=max_wait),
        retry=retry_if_exception_type(exc_type),
    )


def http_retry():
    """Katalog sklepu (product-service)."""
    return _network_retry(requests.RequestException, base=0.3, max_wait=3)


def redis_retry():
    """Koszyk w redisie."""
    return _network_retry(redis.RedisError, base=0.2, max_wait=2)
