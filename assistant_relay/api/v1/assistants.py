"""Assistant chat REST API routes - V1."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ...auth import TokenVerifier, get_token_verifier
from ...errors import AssistantRelayError, MessageValidationError
from ...models.assistant import ChatRequest, ChatResponse, ErrorResponse
from ...services.orchestrator import ConversationOrchestrator
from ...services.profiles import ENDPOINTS
from ...utils.logger import get_app_logger

router = APIRouter(prefix="/api/v1/assistants", tags=["Assistants"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}

_TYPES_BY_ENDPOINT = {endpoint: assistant_type for assistant_type, endpoint in ENDPOINTS.items()}


def get_orchestrator(request: Request) -> ConversationOrchestrator:
    """Dependency to get the conversation orchestrator."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=500, detail="Orchestrator not initialized")
    return orchestrator


def _assistant_type_for(endpoint: str) -> str:
    assistant_type = _TYPES_BY_ENDPOINT.get(endpoint)
    if assistant_type is None:
        raise HTTPException(status_code=404, detail=f"Assistant not found: {endpoint}")
    return assistant_type


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error=message).model_dump(),
        headers=CORS_HEADERS
    )


async def _parse_request(request: Request) -> ChatRequest:
    try:
        body = await request.json()
    except ValueError as e:
        raise MessageValidationError("Request body must be valid JSON") from e

    try:
        return ChatRequest.model_validate(body)
    except ValidationError as e:
        raise MessageValidationError(f"Invalid request body: {e.error_count()} validation error(s)") from e


@router.options("/{endpoint}")
async def preflight(endpoint: str):
    """Answer CORS preflight requests."""
    _assistant_type_for(endpoint)
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post(
    "/{endpoint}",
    response_model=ChatResponse,
    responses={500: {"model": ErrorResponse}}
)
async def send_message(
    endpoint: str,
    request: Request,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
    verifier: TokenVerifier = Depends(get_token_verifier)
):
    """
    Relay one chat turn to an assistant.

    Every failure is reported as HTTP 500 with an ``{"error": ...}`` body.
    """
    assistant_type = _assistant_type_for(endpoint)
    logger = get_app_logger()

    try:
        user_id = verifier.verify(request.headers.get("Authorization"))
        payload = await _parse_request(request)

        result = await orchestrator.send_message(
            user_id=user_id,
            assistant_type=assistant_type,
            message=payload.message,
            conversation_id=payload.conversation_id,
            user_context=payload.user_context
        )
    except AssistantRelayError as e:
        logger.error(f"[{endpoint}] {type(e).__name__}: {e}")
        return _error_response(str(e))
    except Exception as e:
        logger.exception(f"[{endpoint}] Unexpected error")
        return _error_response(str(e) or "An unknown error occurred")

    response = ChatResponse(
        response=result.reply_text,
        conversation_id=result.conversation_id,
        thread_id=result.thread_id
    )
    return JSONResponse(content=response.model_dump(by_alias=True), headers=CORS_HEADERS)
