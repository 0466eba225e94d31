from typing import Optional

from fastapi import APIRouter, Depends

from aqvision_api.dependencies import get_openai_adapter
from aqvision_api.schemas import ErrorResponse, InsightRequest, InsightResponse
from aqvision_api.services import OpenAIAdapter

router = APIRouter(
    prefix="/api",
    tags=["AI Insights"]
)


@router.post(
    "/openai",
    response_model=InsightResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Prompt is required"},
        500: {"model": ErrorResponse, "description": "OPENAI_API_KEY not configured"},
    },
)
async def generate_insight(
    request: Optional[InsightRequest] = None,
    adapter: OpenAIAdapter = Depends(get_openai_adapter),
):
    """
    Proxy a prompt to the OpenAI Chat Completions API.

    Body: ``{"prompt": "...", "systemInstruction": "..."}``. On an upstream
    error the upstream status is returned with its parsed body under
    ``details``.
    """
    request = request or InsightRequest()
    text = await adapter.generate(request.prompt, request.system_instruction)
    return InsightResponse(text=text)
