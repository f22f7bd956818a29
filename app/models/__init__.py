"""Domain models for the application"""
from .offer import (
    OFFER_TYPE_LABELS,
    OfferBatchRequest,
    OfferBatchResponse,
    OfferCopy,
    OfferInput,
    OfferMode,
    OfferResult,
    OfferType,
    OfferTypeInfo,
)

__all__ = [
    'OFFER_TYPE_LABELS',
    'OfferBatchRequest', 'OfferBatchResponse',
    'OfferCopy', 'OfferInput', 'OfferMode', 'OfferResult',
    'OfferType', 'OfferTypeInfo',
]
