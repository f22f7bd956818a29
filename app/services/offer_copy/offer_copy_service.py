"""Offer Copy Service - Generate or revise customer-facing offer copy in batches"""
import asyncio
import logging
import time
from typing import Any, List, Mapping, Union

from pydantic import ValidationError

from app.models.offer import (
    OfferBatchRequest,
    OfferBatchResponse,
    OfferInput,
    OfferResult,
)
from app.services.llm.call_llm import TextGenerator
from .concurrency import Err, FailurePolicy, Ok, TaskOutcome, map_with_concurrency
from .errors import (
    BatchShapeError,
    OfferGenerationError,
    OfferTaskError,
    OfferTimeoutError,
)
from .output_decoder import DESCRIPTION_EXCERPT_LENGTH, decode_offer_copy
from .prompts import build_offer_system_prompt, build_offer_user_prompt

logger = logging.getLogger(__name__)

# Maximum wall-clock time allowed per individual offer (seconds)
PER_OFFER_TIMEOUT_SECONDS = 5.0

# Maximum number of offers processed concurrently in a batch
BATCH_CONCURRENCY = 10


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.monotonic() - start) * 1000))


def validate_batch_request(payload: Union[OfferBatchRequest, Mapping[str, Any], Any]) -> OfferBatchRequest:
    """
    Validate the batch shape before anything runs.

    Raises:
        BatchShapeError: wrong offer count, unknown offer type, or a field out of bounds
    """
    if isinstance(payload, OfferBatchRequest):
        return payload
    try:
        return OfferBatchRequest.model_validate(payload)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        logger.warning(f"Rejected offer batch: {len(errors)} validation error(s)")
        raise BatchShapeError("Invalid offer batch request", errors=errors) from e


async def generate_offer_text(
    offer: OfferInput,
    llm: TextGenerator,
    timeout_seconds: float = PER_OFFER_TIMEOUT_SECONDS,
) -> str:
    """
    Call the model once for an offer, bounded by a fixed deadline.

    Returns:
        The model's raw reply text

    Raises:
        OfferTimeoutError: the model did not answer before the deadline (the call is cancelled)
        OfferGenerationError: any other failure from the model call
    """
    messages = [
        {"role": "system", "content": build_offer_system_prompt(offer.offer_type)},
        {"role": "user", "content": build_offer_user_prompt(offer.offer_description, offer.existing_copy)},
    ]
    description_excerpt = offer.offer_description[:DESCRIPTION_EXCERPT_LENGTH]

    def model_call_failed(e: Exception) -> OfferGenerationError:
        logger.error(f"Model call failed for offer \"{description_excerpt}\": {e!r}")
        return OfferGenerationError(
            f"Model call failed for offer \"{description_excerpt}…\": {e}",
            offer_description=offer.offer_description,
        )

    async def call_model() -> str:
        try:
            return await llm.invoke(messages)
        except (asyncio.TimeoutError, TimeoutError) as e:
            # Raised by the backend itself before our deadline
            raise model_call_failed(e) from e

    try:
        return await asyncio.wait_for(call_model(), timeout=timeout_seconds)
    except OfferGenerationError:
        raise
    except asyncio.TimeoutError as e:
        logger.warning(f"Offer \"{description_excerpt}\" timed out after {timeout_seconds}s")
        raise OfferTimeoutError(
            f"Generating copy for offer \"{description_excerpt}…\" timed out after {int(timeout_seconds * 1000)}ms",
            offer_description=offer.offer_description,
        ) from e
    except Exception as e:
        raise model_call_failed(e) from e


async def process_offer(
    offer: OfferInput,
    llm: TextGenerator,
    timeout_seconds: float = PER_OFFER_TIMEOUT_SECONDS,
) -> TaskOutcome:
    """Generate, decode and wrap the copy for one offer as Ok(OfferResult) or Err(OfferTaskError)"""
    start = time.monotonic()
    try:
        text = await generate_offer_text(offer, llm, timeout_seconds=timeout_seconds)
        copy = decode_offer_copy(text, offer.offer_description)
    except OfferTaskError as e:
        return Err(e)
    except Exception as e:
        logger.error(f"Unexpected error processing offer: {e}", exc_info=True)
        error = OfferGenerationError(str(e), offer_description=offer.offer_description)
        error.__cause__ = e
        return Err(error)

    return Ok(OfferResult(
        offer_type=offer.offer_type,
        offer_description=offer.offer_description,
        mode=offer.mode,
        offer_copy=copy,
        processing_time_ms=_elapsed_ms(start),
    ))


async def generate_offer_batch(
    payload: Union[OfferBatchRequest, Mapping[str, Any], Any],
    llm: TextGenerator,
    concurrency: int = BATCH_CONCURRENCY,
    timeout_seconds: float = PER_OFFER_TIMEOUT_SECONDS,
) -> OfferBatchResponse:
    """
    Generate copy for a batch of offers.

    Offers run with bounded concurrency and results come back in request
    order. The batch is fail-fast: if any offer fails, that error is raised
    for the whole batch and no partial results are returned.

    Args:
        payload: OfferBatchRequest or the raw request body
        llm: Generation service
        concurrency: Maximum number of offers in flight
        timeout_seconds: Deadline for each model call

    Returns:
        OfferBatchResponse with one result per offer and the total batch time

    Raises:
        BatchShapeError: the request was rejected before any offer ran
        OfferTaskError: an offer failed (timeout, malformed output, schema violation, other)
    """
    request = validate_batch_request(payload)
    logger.info(f"Generating copy for {len(request.offers)} offer(s)")

    batch_start = time.monotonic()

    async def run(offer: OfferInput, index: int) -> TaskOutcome:
        return await process_offer(offer, llm, timeout_seconds=timeout_seconds)

    try:
        outcomes = await map_with_concurrency(
            request.offers,
            concurrency,
            run,
            policy=FailurePolicy.FAIL_FAST,
        )
    except OfferTaskError as e:
        logger.error(f"Offer batch failed ({e.kind.value}) after {_elapsed_ms(batch_start)}ms: {e}")
        raise

    results: List[OfferResult] = [outcome.value for outcome in outcomes if isinstance(outcome, Ok)]
    total_ms = _elapsed_ms(batch_start)
    logger.info(f"Generated copy for {len(results)} offer(s) in {total_ms}ms")

    return OfferBatchResponse(results=results, total_processing_time_ms=total_ms)
