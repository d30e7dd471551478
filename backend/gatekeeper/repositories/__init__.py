"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from gatekeeper.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    apply_sorting,
    paginate_select,
)
from gatekeeper.repositories.token import TokenRepository
from gatekeeper.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "Page",
    "Pagination",
    "apply_sorting",
    "paginate_select",
    # Domain
    "TokenRepository",
    "UserRepository",
]
