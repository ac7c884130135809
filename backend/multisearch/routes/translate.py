"""
Translation endpoint.

POST /translate {"text": "...", "target_language": "nb-NO"}
"""
from fastapi import APIRouter, HTTPException, Request

from multisearch.core.exceptions import RateLimitExceededError, ValidationError
from multisearch.core.logging import get_logger
from multisearch.core.rate_limit import get_client_ip
from multisearch.models.responses import TranslateRequestBody, TranslateResponseBody
from multisearch.models.translation import TranslationRequest
from multisearch.services.translation.gateway import get_translation_gateway

logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=TranslateResponseBody)
async def translate(request: Request, body: TranslateRequestBody):
    """
    Translate text through the provider waterfall.

    400 for invalid input, 429 when a rate limiter rejects the client,
    503 for any other translation failure.
    """
    client_id = get_client_ip(request)

    try:
        result = await get_translation_gateway().translate(
            TranslationRequest(text=body.text, target_language=body.target_language),
            client_id,
        )
    except ValidationError as e:
        logger.warning("translate_validation_failed", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except RateLimitExceededError as e:
        raise HTTPException(status_code=429, detail=str(e))
    except Exception as e:
        logger.error(
            "translate_error",
            target_language=body.target_language.value,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise HTTPException(status_code=503, detail="Translation service temporarily unavailable")

    return TranslateResponseBody(
        success=True,
        translated_text=result.translated_text,
        detected_source_language=result.detected_source_language,
        confidence=result.confidence,
    )
