"""
Custom Exceptions for AI Caller
Provides structured error handling across the application
"""

from typing import Optional, Dict, Any


class AICallerException(Exception):
    """Base exception for all AI Caller errors"""

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the client-facing response body"""
        return {"error": self.message}


# Configuration Exceptions
class ConfigurationError(AICallerException):
    """Raised when a required setting or credential is missing"""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting} if setting else {},
            status_code=503
        )


# Authentication & Authorization Exceptions
class AuthenticationError(AICallerException):
    """Raised when authentication fails"""

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            error_code="UNAUTHORIZED",
            details=details,
            status_code=401
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email and password do not match an account"""

    def __init__(self):
        super().__init__(message="Invalid credentials")


class AccountExistsError(AICallerException):
    """Raised when registering an email that already has an account"""

    def __init__(self, email: str):
        super().__init__(
            message="User already exists",
            error_code="ACCOUNT_EXISTS",
            details={"email": email},
            status_code=400
        )


class AuthorizationError(AICallerException):
    """Raised when an authenticated user lacks access"""

    def __init__(self, message: str = "Forbidden", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            error_code="FORBIDDEN",
            details=details,
            status_code=403
        )


# Provider Exceptions
class ProviderError(AICallerException):
    """Raised when the language-model provider fails"""

    def __init__(self, message: str, provider: str = "openai", provider_status: Optional[int] = None):
        details = {"provider": provider}
        if provider_status:
            details["provider_status"] = provider_status
        super().__init__(
            message=message,
            error_code="PROVIDER_ERROR",
            details=details,
            status_code=502
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"error": "Failed to generate response"}


# Storage Exceptions
class StorageError(AICallerException):
    """Raised on unexpected persistence failures. The message is internal only."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="STORAGE_ERROR",
            details={"operation": operation} if operation else {},
            status_code=500
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"error": "Internal storage error"}


# Call Exceptions
class CallError(AICallerException):
    """Base exception for call-related errors"""
    pass


class CallNotFoundError(CallError):
    """Raised when a call does not exist for the requesting account"""

    def __init__(self, call_id: str):
        super().__init__(
            message="Call not found",
            error_code="CALL_NOT_FOUND",
            details={"call_id": call_id},
            status_code=404
        )


class CallFetchError(CallError):
    """Raised when a call lookup fails unexpectedly"""

    def __init__(self, call_id: str):
        super().__init__(
            message="Failed to fetch call",
            error_code="CALL_FETCH_FAILED",
            details={"call_id": call_id},
            status_code=500
        )


class CallListError(CallError):
    """Raised when listing calls fails unexpectedly"""

    def __init__(self):
        super().__init__(
            message="Failed to fetch calls",
            error_code="CALL_LIST_FAILED",
            status_code=500
        )


# Agent Exceptions
class AgentError(AICallerException):
    """Base exception for agent-related errors"""
    pass


class AgentNotFoundError(AgentError):
    """Raised when an agent does not exist for the requesting account"""

    def __init__(self, agent_id: Optional[str] = None):
        super().__init__(
            message="Agent not found",
            error_code="AGENT_NOT_FOUND",
            details={"agent_id": agent_id} if agent_id else {},
            status_code=404
        )


class AgentFetchError(AgentError):
    """Raised when an agent lookup fails unexpectedly"""

    def __init__(self, agent_id: Optional[str] = None):
        super().__init__(
            message="Failed to fetch agent",
            error_code="AGENT_FETCH_FAILED",
            details={"agent_id": agent_id} if agent_id else {},
            status_code=500
        )


class AgentWriteError(AgentError):
    """Raised when creating, updating or deleting an agent fails unexpectedly"""

    def __init__(self, action: str, agent_id: Optional[str] = None):
        super().__init__(
            message=f"Failed to {action} agent",
            error_code=f"AGENT_{action.upper()}_FAILED",
            details={"agent_id": agent_id} if agent_id else {},
            status_code=500
        )
