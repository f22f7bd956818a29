"""Prompts for offer copy generation"""
from .offer_prompt import (
    OFFER_GUIDELINES,
    build_offer_system_prompt,
    build_offer_user_prompt,
)

__all__ = [
    "OFFER_GUIDELINES",
    "build_offer_system_prompt",
    "build_offer_user_prompt",
]
