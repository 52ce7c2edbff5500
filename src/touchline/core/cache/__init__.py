from touchline.core.cache.invalidation import DataChangeType, InvalidationRouter
from touchline.core.cache.keys import derive_key
from touchline.core.cache.manager import CacheStats, OperationStats, ResponseCache
from touchline.core.cache.store import CacheStore
from touchline.core.cache.ttl import DEFAULT_TTL, OPERATION_TTLS, TTLPolicy

__all__ = [
    "CacheStats",
    "CacheStore",
    "DEFAULT_TTL",
    "DataChangeType",
    "InvalidationRouter",
    "OPERATION_TTLS",
    "OperationStats",
    "ResponseCache",
    "TTLPolicy",
    "derive_key",
]
