"""Service layer public API.

Only the shared primitives are re-exported here; concrete services live in
their own subpackages (``portfolio.services.authentication`` and so on) and
are wired together by :mod:`portfolio.core.container`.
"""

from __future__ import annotations

from ._shared.base import BaseService
from ._shared.dto import PageMeta
from ._shared.result import Failure, Result

__all__ = ["BaseService", "Failure", "PageMeta", "Result"]
