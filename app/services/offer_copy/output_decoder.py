"""
Offer Copy Decoder - Convert the model's raw reply into a validated OfferCopy

Decoding runs in two explicit stages so an unvalidated document is never
mistaken for the final type:

1. parse_document: raw text -> ParseSuccess(document) | ParseFailure(raw_excerpt)
2. validate_document: document -> ValidRecord(copy) | SchemaFailure(details)

decode_offer_copy composes both and raises the matching OfferTaskError.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from app.models.offer import OfferCopy
from .errors import MalformedOutputError, SchemaViolationError

logger = logging.getLogger(__name__)

RAW_EXCERPT_LENGTH = 200
DESCRIPTION_EXCERPT_LENGTH = 60

_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


@dataclass(frozen=True)
class ParseSuccess:
    document: Any


@dataclass(frozen=True)
class ParseFailure:
    raw_excerpt: str
    reason: str


ParseResult = Union[ParseSuccess, ParseFailure]


@dataclass(frozen=True)
class ValidRecord:
    copy: OfferCopy


@dataclass(frozen=True)
class SchemaFailure:
    details: List[Dict[str, Any]] = field(default_factory=list)


ValidationResult = Union[ValidRecord, SchemaFailure]


def strip_code_fence(text: str) -> str:
    """
    Strip markdown code fences the model may wrap its JSON in.

    Handles a leading ``` or ```json marker and/or a trailing ``` marker.
    Unfenced text is only trimmed, so applying this twice is the same as once.
    """
    cleaned = _LEADING_FENCE.sub("", text.strip())
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def parse_document(raw_text: str) -> ParseResult:
    cleaned = strip_code_fence(raw_text)
    try:
        return ParseSuccess(document=json.loads(cleaned))
    except json.JSONDecodeError as e:
        return ParseFailure(raw_excerpt=raw_text[:RAW_EXCERPT_LENGTH], reason=str(e))


def validate_document(document: Any) -> ValidationResult:
    if not isinstance(document, dict):
        return SchemaFailure(details=[{
            "type": "model_type",
            "loc": (),
            "msg": f"Expected a JSON object, got {type(document).__name__}",
        }])
    try:
        return ValidRecord(copy=OfferCopy.model_validate(document))
    except ValidationError as e:
        return SchemaFailure(details=e.errors(include_url=False, include_context=False, include_input=False))


def decode_offer_copy(raw_text: str, offer_description: str) -> OfferCopy:
    """
    Decode the model's reply for one offer.

    Args:
        raw_text: Raw text returned by the model
        offer_description: Description of the originating offer (for diagnostics)

    Returns:
        The validated OfferCopy

    Raises:
        MalformedOutputError: The reply is not JSON, even after fence stripping
        SchemaViolationError: The reply is JSON but not a valid OfferCopy
    """
    description_excerpt = offer_description[:DESCRIPTION_EXCERPT_LENGTH]

    parsed = parse_document(raw_text)
    if isinstance(parsed, ParseFailure):
        logger.warning(f"Unparseable model output for offer \"{description_excerpt}\": {parsed.reason}")
        raise MalformedOutputError(
            f"Model returned invalid JSON for offer \"{description_excerpt}…\": {parsed.raw_excerpt}",
            offer_description=offer_description,
            raw_excerpt=parsed.raw_excerpt,
        )

    validated = validate_document(parsed.document)
    if isinstance(validated, SchemaFailure):
        fields = ", ".join(
            ".".join(str(part) for part in detail.get("loc", ())) or "<root>"
            for detail in validated.details
        )
        logger.warning(f"Model output for offer \"{description_excerpt}\" failed validation: {fields}")
        raise SchemaViolationError(
            f"Model output for offer \"{description_excerpt}…\" does not match the copy schema ({fields})",
            offer_description=offer_description,
            details=validated.details,
        )

    return validated.copy
