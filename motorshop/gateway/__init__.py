"""
Persistence gateways.

This package contains the gateway contract the intake sessions depend on
and the storage backends that implement it.
"""

from .interface import EntityGateway, Gateway, GatewayError, LiveList
from .memory import MemoryGateway
from .sqlite_gateway import SqliteGateway

__all__ = [
    "EntityGateway",
    "Gateway",
    "GatewayError",
    "LiveList",
    "MemoryGateway",
    "SqliteGateway",
]
