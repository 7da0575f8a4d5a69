"""
Routers for the website forms.
"""

from app.apps.website.routers.contact import router as contact_router
from app.apps.website.routers.quotes import router as quotes_router

__all__ = [
    "contact_router",
    "quotes_router",
]
