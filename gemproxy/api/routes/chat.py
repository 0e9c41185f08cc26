"""OpenAI-compatible chat completions endpoint."""

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from gemproxy.api.dependencies import ChatServiceDep, RequestContextDep
from gemproxy.services.openai_streaming import SSE_HEADERS, SSE_MEDIA_TYPE


router = APIRouter()


@router.post("/v1/chat/completions", response_model=None)
@router.post("/chat/completions", response_model=None)
async def create_chat_completion(
    request: Request,
    service: ChatServiceDep,
    context: RequestContextDep,
) -> Response:
    """
    Create a chat completion in OpenAI format.

    The body is read and parsed by hand so that malformed JSON is reported
    as a 400 before anything reaches the backend.
    """
    body = await request.body()
    prepared = service.prepare(body, context)

    if prepared.stream:
        return StreamingResponse(
            service.stream(prepared),
            media_type=SSE_MEDIA_TYPE,
            headers=SSE_HEADERS,
        )

    completion = await service.complete(prepared)
    return JSONResponse(content=completion)
