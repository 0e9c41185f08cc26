"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from gemproxy.services.chat_completion import ChatCompletionService, RequestContext


def get_chat_service(request: Request) -> ChatCompletionService:
    service: ChatCompletionService = request.app.state.chat_service
    return service


def get_request_context(request: Request) -> RequestContext:
    request_id = getattr(request.state, "request_id", None)
    client_ip = request.client.host if request.client else "unknown"
    if request_id:
        return RequestContext(request_id=request_id, client_ip=client_ip)
    return RequestContext(client_ip=client_ip)


ChatServiceDep = Annotated[ChatCompletionService, Depends(get_chat_service)]
RequestContextDep = Annotated[RequestContext, Depends(get_request_context)]
