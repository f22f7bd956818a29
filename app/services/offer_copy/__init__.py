"""Offer copy service module"""
from .offer_copy_service import (
    BATCH_CONCURRENCY,
    PER_OFFER_TIMEOUT_SECONDS,
    generate_offer_batch,
    generate_offer_text,
    process_offer,
    validate_batch_request,
)
from .concurrency import Err, FailurePolicy, Ok, map_with_concurrency
from .errors import (
    BatchShapeError,
    FailureKind,
    MalformedOutputError,
    OfferCopyError,
    OfferGenerationError,
    OfferTaskError,
    OfferTimeoutError,
    SchemaViolationError,
)
from .output_decoder import decode_offer_copy, strip_code_fence

__all__ = [
    "BATCH_CONCURRENCY",
    "PER_OFFER_TIMEOUT_SECONDS",
    "generate_offer_batch",
    "generate_offer_text",
    "process_offer",
    "validate_batch_request",
    "Err",
    "FailurePolicy",
    "Ok",
    "map_with_concurrency",
    "BatchShapeError",
    "FailureKind",
    "MalformedOutputError",
    "OfferCopyError",
    "OfferGenerationError",
    "OfferTaskError",
    "OfferTimeoutError",
    "SchemaViolationError",
    "decode_offer_copy",
    "strip_code_fence",
]
