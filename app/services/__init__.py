"""Services module"""

from app.services.offer_copy import generate_offer_batch

__all__ = [
    "generate_offer_batch",
]
