"""
NeuroGate Persistence Layer

Public exports for the in-memory audit log and the Redis fingerprint store.
"""

from .connection import get_redis_client
from .audit_log import AuditLog, build_event, summarize
from .fingerprint_store import FingerprintStore

__all__ = [
    "get_redis_client",
    "AuditLog",
    "build_event",
    "summarize",
    "FingerprintStore",
]
