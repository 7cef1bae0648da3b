from __future__ import annotations

from functools import lru_cache

from resourcetraversal.app.service import TraversalService
from resourcetraversal.config import get_settings


@lru_cache(maxsize=1)
def get_service() -> TraversalService:
    settings = get_settings()
    return TraversalService(settings)
