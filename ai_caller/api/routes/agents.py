"""
Agent API routes

Every route is scoped to the authenticated account; another account's agent
is reported exactly like a missing one.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ai_caller.api.dependencies import get_db
from ai_caller.api.middleware.auth import get_current_user
from ai_caller.core.exceptions import AgentFetchError, AgentNotFoundError, AgentWriteError, StorageError
from ai_caller.core.logging import get_logger
from ai_caller.core.templates import get_template
from ai_caller.db.models import User
from ai_caller.db.repository import AgentRepository
from ai_caller.models.agent import (
    AgentCreateRequest,
    AgentDeleteResponse,
    AgentDetail,
    AgentDetailResponse,
    AgentListResponse,
    AgentUpdateRequest
)

logger = get_logger(__name__)

router = APIRouter(prefix="/agents", tags=["agents"])


@router.get("", response_model=AgentListResponse)
def list_agents(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the caller's agents, newest first"""
    try:
        agents = AgentRepository(db).list_agents(user.id)
    except StorageError as e:
        logger.error(f"Failed to list agents for user {user.id}: {e.message}")
        raise AgentFetchError() from e

    return AgentListResponse(agents=[AgentDetail.model_validate(agent) for agent in agents])


@router.post("", response_model=AgentDetailResponse, status_code=201)
def create_agent(
    request: AgentCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create an agent

    - **template**: Optional template id; a known template supplies the
      system prompt, greeting and voice
    """
    fields = request.model_dump()
    fields["template"] = None

    if request.template:
        template = get_template(request.template)
        if template:
            fields.update(
                template=template.id,
                system_prompt=template.system_prompt,
                greeting=template.greeting,
                voice=template.suggested_voice
            )
        else:
            logger.warning(f"Unknown template '{request.template}', using the submitted prompt")

    try:
        agent = AgentRepository(db).create_agent(user.id, is_active=True, **fields)
    except StorageError as e:
        logger.error(f"Failed to create agent for user {user.id}: {e.message}")
        raise AgentWriteError("create") from e

    return AgentDetailResponse(agent=AgentDetail.model_validate(agent))


@router.get("/{agent_id}", response_model=AgentDetailResponse)
def get_agent(
    agent_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get one agent

    - **agent_id**: Unique identifier of the agent
    """
    try:
        agent = AgentRepository(db).get_agent(agent_id, user.id)
    except StorageError as e:
        logger.error(f"Failed to fetch agent {agent_id} for user {user.id}: {e.message}")
        raise AgentFetchError(agent_id) from e

    if not agent:
        raise AgentNotFoundError(agent_id)

    return AgentDetailResponse(agent=AgentDetail.model_validate(agent))


@router.patch("/{agent_id}", response_model=AgentDetailResponse)
def update_agent(
    agent_id: str,
    request: AgentUpdateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the fields sent in the body"""
    try:
        agent = AgentRepository(db).update_agent(agent_id, user.id, request.changes())
    except StorageError as e:
        logger.error(f"Failed to update agent {agent_id} for user {user.id}: {e.message}")
        raise AgentWriteError("update", agent_id) from e

    if not agent:
        raise AgentNotFoundError(agent_id)

    return AgentDetailResponse(agent=AgentDetail.model_validate(agent))


@router.delete("/{agent_id}", response_model=AgentDeleteResponse)
def delete_agent(
    agent_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete an agent. Its calls are kept without an agent."""
    try:
        deleted = AgentRepository(db).delete_agent(agent_id, user.id)
    except StorageError as e:
        logger.error(f"Failed to delete agent {agent_id} for user {user.id}: {e.message}")
        raise AgentWriteError("delete", agent_id) from e

    if not deleted:
        raise AgentNotFoundError(agent_id)

    logger.info(f"Deleted agent {agent_id} for user {user.id}")
    return AgentDeleteResponse(success=True)
