"""API Routes"""

from . import admin, agents, auth, calls, config, health, templates

__all__ = ["admin", "agents", "auth", "calls", "config", "health", "templates"]
