"""Ordered lease store implementations."""

from .base import OrderedLeaseStore
from .memory import MemoryLeaseStore
from .redis_store import RedisLeaseStore

__all__ = ["MemoryLeaseStore", "OrderedLeaseStore", "RedisLeaseStore"]
