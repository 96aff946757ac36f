"""Core module for configuration, settings, and shared utilities"""

from .config import get_settings, Settings
from .logging import setup_logging, get_logger
from .voice_config import (
    VoiceConfig,
    VoiceDescriptor,
    LatencyTargets,
    CallLimits,
    Pricing,
    CreditPackage,
    FreeTier,
    CostModel,
    load_voice_config
)
from .exceptions import (
    AICallerException,
    ConfigurationError,
    AuthenticationError,
    InvalidCredentialsError,
    AccountExistsError,
    AuthorizationError,
    ProviderError,
    StorageError,
    CallError,
    CallNotFoundError,
    CallFetchError,
    CallListError,
    AgentError,
    AgentNotFoundError,
    AgentFetchError,
    AgentWriteError
)
from .security import hash_password, verify_password
from .templates import AgentTemplate, AGENT_TEMPLATES, get_template

__all__ = [
    # Config
    "get_settings",
    "Settings",
    # Logging
    "setup_logging",
    "get_logger",
    # Voice configuration
    "VoiceConfig",
    "VoiceDescriptor",
    "LatencyTargets",
    "CallLimits",
    "Pricing",
    "CreditPackage",
    "FreeTier",
    "CostModel",
    "load_voice_config",
    # Exceptions
    "AICallerException",
    "ConfigurationError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "AccountExistsError",
    "AuthorizationError",
    "ProviderError",
    "StorageError",
    "CallError",
    "CallNotFoundError",
    "CallFetchError",
    "CallListError",
    "AgentError",
    "AgentNotFoundError",
    "AgentFetchError",
    "AgentWriteError",
    # Security
    "hash_password",
    "verify_password",
    # Templates
    "AgentTemplate",
    "AGENT_TEMPLATES",
    "get_template"
]
