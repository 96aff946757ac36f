"""
Call API routes

Storage access is synchronous: plain handlers run in the threadpool, and the
async reply handler moves its lookup off the event loop.
"""

import asyncio
from typing import AsyncIterator, Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ai_caller.api.dependencies import get_db, get_response_service
from ai_caller.api.middleware.auth import get_current_user
from ai_caller.core.exceptions import (
    AgentNotFoundError,
    CallFetchError,
    CallListError,
    CallNotFoundError,
    StorageError
)
from ai_caller.core.logging import get_logger
from ai_caller.db.models import Call, User
from ai_caller.db.repository import CallRepository
from ai_caller.models.call import (
    CallDetail,
    CallDetailResponse,
    CallListResponse,
    ReplyRequest,
    ReplyResponse
)
from ai_caller.services.llm.openai_service import ResponseGenerationService

logger = get_logger(__name__)

router = APIRouter(prefix="/calls", tags=["calls"])


def _load_call(db: Session, call_id: str, user: User) -> Call:
    try:
        call = CallRepository(db).get_call(call_id, user.id)
    except StorageError as e:
        logger.error(f"Failed to fetch call {call_id} for user {user.id}: {e.message}")
        raise CallFetchError(call_id) from e

    if not call:
        raise CallNotFoundError(call_id)
    return call


@router.get("", response_model=CallListResponse)
def list_calls(
    agent_id: Optional[str] = Query(None, description="Only calls handled by this agent"),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of calls to return"),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List the caller's calls, newest first

    - **agent_id**: Optional agent filter
    - **limit**: Maximum number of calls to return (1-100)
    - **offset**: Number of calls to skip
    """
    try:
        calls, total = CallRepository(db).list_calls(
            user.id, agent_id=agent_id, limit=limit, offset=offset
        )
    except StorageError as e:
        logger.error(f"Failed to list calls for user {user.id}: {e.message}")
        raise CallListError() from e

    return CallListResponse(
        calls=[CallDetail.model_validate(call) for call in calls],
        total=total
    )


@router.get("/{call_id}", response_model=CallDetailResponse)
def get_call(
    call_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get one call with its agent's public fields

    - **call_id**: Unique identifier of the call
    """
    call = _load_call(db, call_id, user)
    return CallDetailResponse(call=CallDetail.model_validate(call))


async def _primed(fragments: AsyncIterator[str]) -> AsyncIterator[str]:
    """
    Pull the first fragment before the response starts, so a provider
    failure on the opening request still maps to an error status.
    """
    try:
        first = await fragments.__anext__()
    except StopAsyncIteration:
        first = None

    async def relay():
        try:
            if first is not None:
                yield first
                async for fragment in fragments:
                    yield fragment
        finally:
            # Client disconnects land here and close the provider stream
            await fragments.aclose()

    return relay()


@router.post("/{call_id}/reply", response_model=ReplyResponse)
async def generate_reply(
    call_id: str,
    request: ReplyRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    service: ResponseGenerationService = Depends(get_response_service)
):
    """
    Generate the agent's next reply for a call

    - **turns**: Conversation so far, oldest first
    - **temperature**: Sampling temperature
    - **stream**: Return text/plain fragments as they arrive
    """
    call = await asyncio.to_thread(_load_call, db, call_id, user)
    if not call.agent:
        raise AgentNotFoundError(call.agent_id)

    system_prompt = call.agent.system_prompt
    logger.info(f"Generating reply for call {call_id} with agent {call.agent.id}")

    if request.stream:
        fragments = service.stream(request.turns, system_prompt, request.temperature)
        return StreamingResponse(
            await _primed(fragments),
            media_type="text/plain; charset=utf-8"
        )

    reply = await service.generate(request.turns, system_prompt, request.temperature)
    return ReplyResponse(reply=reply, estimated_tokens=service.estimate_tokens(reply))
