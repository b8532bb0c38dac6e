"""
portfolio.services._shared.ports
================================

*Ports* (hexagonal interfaces) the token service depends on.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider`, signing and verification of access tokens.

- :mod:`user_store`:
    :class:`~.UserStore`, user lookup, role lookup and write-back of
    refresh-token state, atomic rotation (:class:`~.RotationResult`);
    :class:`~.InMemoryUserStore` for unit tests.

Concrete adapters live under ``portfolio.infra``.
"""

from __future__ import annotations

from .token_provider import TokenProvider
from .user_store import InMemoryUserStore, RotationResult, UserStore

__all__ = [
    "InMemoryUserStore",
    "RotationResult",
    "TokenProvider",
    "UserStore",
]
