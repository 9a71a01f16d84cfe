"""Route modules."""

from .account import router as account_router
from .transcriptions import router as transcriptions_router
from .uploads import router as uploads_router

__all__ = ["account_router", "transcriptions_router", "uploads_router"]
