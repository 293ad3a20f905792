import logging

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_video_token_issuer
from ..schemas.video.video import CallDetailsResponse, StreamTokenRequest, StreamTokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stream", tags=["Video"])

NOT_CONFIGURED = "Video calling service not configured"


@router.post("/token", response_model=StreamTokenResponse)
async def create_stream_token(body: StreamTokenRequest, issuer=Depends(get_video_token_issuer)):
    if issuer is None:
        raise HTTPException(status_code=503, detail=NOT_CONFIGURED)
    try:
        token = await issuer.issue_user_token(body.userId, body.userName, body.role or "user")
    except Exception as e:
        logger.error(f"Error generating Stream token: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate video token")
    return StreamTokenResponse(token=token, apiKey=issuer.api_key)


@router.get("/call/{call_id}", response_model=CallDetailsResponse)
async def get_call_details(call_id: str, issuer=Depends(get_video_token_issuer)):
    if issuer is None:
        raise HTTPException(status_code=503, detail=NOT_CONFIGURED)
    try:
        call = await issuer.get_call(call_id)
    except Exception as e:
        logger.error(f"Error fetching call details: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch call details")
    return CallDetailsResponse(call=call)
