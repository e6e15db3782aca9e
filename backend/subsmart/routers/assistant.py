from fastapi import APIRouter, HTTPException

from subsmart.schemas.assistant import ParseRequest, SubscriptionDraft
from subsmart.services.gemini import AIServiceError, AIUnavailableError, parse_subscription_input


router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post("/parse", response_model=SubscriptionDraft)
async def parse_subscription(body: ParseRequest):
    try:
        return await parse_subscription_input(body.text)
    except AIUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
