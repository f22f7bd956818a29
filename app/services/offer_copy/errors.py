"""Error taxonomy for offer copy generation"""
from enum import Enum
from typing import Any, Dict, List, Optional


class FailureKind(str, Enum):
    """Terminal per-offer failure classification"""
    TIMEOUT = "timeout"
    MALFORMED_OUTPUT = "malformed_output"
    SCHEMA_VIOLATION = "schema_violation"
    UNCLASSIFIED = "unclassified"


class OfferCopyError(Exception):
    """Base error for the offer copy service"""


class BatchShapeError(OfferCopyError):
    """The batch request was rejected before any offer was processed"""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class OfferTaskError(OfferCopyError):
    """A single offer failed; under fail-fast this fails the whole batch"""
    kind = FailureKind.UNCLASSIFIED

    def __init__(self, message: str, offer_description: str = ""):
        super().__init__(message)
        self.offer_description = offer_description


class OfferTimeoutError(OfferTaskError):
    kind = FailureKind.TIMEOUT


class MalformedOutputError(OfferTaskError):
    """The model reply could not be parsed as JSON"""
    kind = FailureKind.MALFORMED_OUTPUT

    def __init__(self, message: str, offer_description: str = "", raw_excerpt: str = ""):
        super().__init__(message, offer_description)
        self.raw_excerpt = raw_excerpt


class SchemaViolationError(OfferTaskError):
    """The model reply parsed, but is not a valid OfferCopy"""
    kind = FailureKind.SCHEMA_VIOLATION

    def __init__(
        self,
        message: str,
        offer_description: str = "",
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message, offer_description)
        self.details = details or []


class OfferGenerationError(OfferTaskError):
    """Any other failure while generating copy for an offer"""
    kind = FailureKind.UNCLASSIFIED
