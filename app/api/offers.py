import json
import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.middleware.auth import get_current_user_id
from app.models.offer import OFFER_TYPE_LABELS, OfferBatchResponse, OfferTypeInfo
from app.services.llm.call_llm import LLMService, get_llm_service
from app.services.offer_copy import BatchShapeError, generate_offer_batch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/offers", tags=["offers"])


def bad_request(message: str, errors: list) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"code": "bad_request:api", "message": message, "errors": errors},
    )


@router.get("/types", response_model=List[OfferTypeInfo])
async def list_offer_types():
    """Offer types accepted by /generate, with display labels"""
    return [
        OfferTypeInfo(value=offer_type, label=label)
        for offer_type, label in OFFER_TYPE_LABELS.items()
    ]


@router.post("/generate", response_model=OfferBatchResponse, response_model_by_alias=True)
async def generate_offers(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    llm: LLMService = Depends(get_llm_service),
):
    """
    Generate or modify customer-facing copy for a single offer or a batch of up to 50.

    Body: {"offers": [{"offerType", "offerDescription", "existingCopy"?}, ...]}
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Error parsing offer request body: {e}")
        return bad_request("Request body must be JSON", [])

    try:
        return await generate_offer_batch(payload, llm)
    except BatchShapeError as e:
        logger.error(f"Error parsing offer request body: {e.errors}")
        return bad_request(str(e), e.errors)
    except Exception as e:
        logger.error(f"Error generating offer copy for user {user_id}: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to generate offer copy", "message": str(e)},
        )
