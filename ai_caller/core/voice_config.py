"""
Voice Configuration

Process-wide, read-only settings for voice agents: latency targets, call
limits, pricing, provider unit costs and the selectable voice catalog.
Built once at startup by load_voice_config() and handed to whatever needs it.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .config import Settings


@dataclass(frozen=True)
class AppConfig:
    name: str
    description: str
    url: str


@dataclass(frozen=True)
class LatencyTargets:
    """Turn-taking thresholds, in milliseconds"""
    max_response_latency_ms: int = 500
    # Silence before the user is considered done speaking
    silence_threshold_ms: int = 800


@dataclass(frozen=True)
class CallLimits:
    """Advisory limits consumed by call scheduling"""
    max_call_duration_seconds: int = 1800
    max_concurrent_calls: int = 10


@dataclass(frozen=True)
class CreditPackage:
    amount: int
    bonus: int
    minutes: int


@dataclass(frozen=True)
class FreeTier:
    test_calls: int = 10
    live_minutes: int = 0
    agents: int = 1


@dataclass(frozen=True)
class Pricing:
    """Credit pricing. Packages are kept ordered by amount ascending."""
    per_minute: float = 0.12
    minimum_purchase: int = 20
    credit_packages: Tuple[CreditPackage, ...] = (
        CreditPackage(amount=20, bonus=0, minutes=166),
        CreditPackage(amount=100, bonus=10, minutes=916),
        CreditPackage(amount=500, bonus=75, minutes=4791),
    )
    free_tier: FreeTier = field(default_factory=FreeTier)

    def __post_init__(self):
        ordered = tuple(sorted(self.credit_packages, key=lambda p: p.amount))
        object.__setattr__(self, "credit_packages", ordered)

    def package_for(self, amount: float) -> Optional[CreditPackage]:
        """Largest package a purchase of `amount` qualifies for"""
        if amount < self.minimum_purchase:
            return None
        match = None
        for package in self.credit_packages:
            if package.amount <= amount:
                match = package
        return match


@dataclass(frozen=True)
class CostModel:
    """Provider cost per unit, in USD"""
    speech_to_text_per_minute: float = 0.0043
    llm_per_call: float = 0.005
    tts_per_1k_characters: float = 0.30
    telephony_per_minute: float = 0.013

    def estimate_call_cost(self, minutes: float, tts_characters: int = 0) -> float:
        """Estimate what one call costs us across all providers"""
        if minutes < 0 or tts_characters < 0:
            raise ValueError("minutes and tts_characters must be non-negative")
        cost = (
            minutes * (self.speech_to_text_per_minute + self.telephony_per_minute)
            + self.llm_per_call
            + (tts_characters / 1000) * self.tts_per_1k_characters
        )
        return round(cost, 4)


@dataclass(frozen=True)
class VoiceDescriptor:
    id: str
    name: str
    provider: str
    tags: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "provider": self.provider,
            "tags": list(self.tags),
        }


DEFAULT_VOICES: Tuple[VoiceDescriptor, ...] = (
    VoiceDescriptor(id="rachel", name="Rachel (Professional)", provider="elevenlabs", tags=("female", "professional")),
    VoiceDescriptor(id="adam", name="Adam (Friendly)", provider="elevenlabs", tags=("male", "friendly")),
    VoiceDescriptor(id="bella", name="Bella (Warm)", provider="elevenlabs", tags=("female", "warm")),
    VoiceDescriptor(id="josh", name="Josh (Energetic)", provider="elevenlabs", tags=("male", "energetic")),
)


class VoiceConfig:
    """Immutable bundle of the named configuration groups"""

    def __init__(
        self,
        app: AppConfig,
        latency: LatencyTargets,
        limits: CallLimits,
        pricing: Pricing,
        costs: CostModel,
        voices: Tuple[VoiceDescriptor, ...],
        default_voice: str,
        default_voice_provider: str,
    ):
        self._app = app
        self._latency = latency
        self._limits = limits
        self._pricing = pricing
        self._costs = costs
        self._voices = tuple(voices)
        self._default_voice = default_voice
        self._default_voice_provider = default_voice_provider

    def app_config(self) -> AppConfig:
        return self._app

    def latency_targets(self) -> LatencyTargets:
        return self._latency

    def call_limits(self) -> CallLimits:
        return self._limits

    def pricing(self) -> Pricing:
        return self._pricing

    def cost_model(self) -> CostModel:
        return self._costs

    def voice_catalog(self) -> Tuple[VoiceDescriptor, ...]:
        return self._voices

    def get_voice(self, voice_id: str) -> Optional[VoiceDescriptor]:
        for voice in self._voices:
            if voice.id == voice_id:
                return voice
        return None

    @property
    def default_voice(self) -> VoiceDescriptor:
        return self.get_voice(self._default_voice) or self._voices[0]

    @property
    def default_voice_provider(self) -> str:
        return self._default_voice_provider


def load_voice_config(settings: Settings) -> VoiceConfig:
    """
    Build the voice configuration from defaults and environment overrides.

    Args:
        settings: Application settings (environment already applied)

    Returns:
        VoiceConfig that stays fixed for the lifetime of the process
    """
    return VoiceConfig(
        app=AppConfig(
            name=settings.app_name,
            description=settings.app_description,
            url=settings.app_url,
        ),
        latency=LatencyTargets(
            max_response_latency_ms=settings.max_response_latency_ms,
            silence_threshold_ms=settings.silence_threshold_ms,
        ),
        limits=CallLimits(
            max_call_duration_seconds=settings.max_call_duration_seconds,
            max_concurrent_calls=settings.max_concurrent_calls,
        ),
        pricing=Pricing(per_minute=settings.price_per_minute),
        costs=CostModel(),
        voices=DEFAULT_VOICES,
        default_voice=settings.default_voice,
        default_voice_provider=settings.default_voice_provider,
    )
