"""
Public configuration endpoints
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from ai_caller.api.dependencies import get_voice_config
from ai_caller.core.voice_config import VoiceConfig

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/voices")
async def list_voices(voice_config: VoiceConfig = Depends(get_voice_config)):
    """Selectable voices, in catalog order"""
    return {
        "voices": [voice.to_dict() for voice in voice_config.voice_catalog()],
        "default_voice": voice_config.default_voice.id,
        "default_provider": voice_config.default_voice_provider
    }


@router.get("/pricing")
async def get_pricing(voice_config: VoiceConfig = Depends(get_voice_config)):
    """Credit packages and free tier allowances"""
    pricing = voice_config.pricing()
    return {
        "per_minute": pricing.per_minute,
        "minimum_purchase": pricing.minimum_purchase,
        "credit_packages": [asdict(package) for package in pricing.credit_packages],
        "free_tier": asdict(pricing.free_tier)
    }


@router.get("/limits")
async def get_limits(voice_config: VoiceConfig = Depends(get_voice_config)):
    """Latency targets and call limits"""
    return {
        "latency": asdict(voice_config.latency_targets()),
        "call_limits": asdict(voice_config.call_limits())
    }
