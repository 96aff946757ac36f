"""
Agent template endpoints
"""

from fastapi import APIRouter

from ai_caller.core.templates import AGENT_TEMPLATES

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("")
async def list_templates():
    """Templates available when creating an agent"""
    return {"templates": [template.to_dict() for template in AGENT_TEMPLATES]}
