#!/usr/bin/env python3
"""
Script to run the AI Caller server
"""

import os
import sys

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import uvicorn

from ai_caller.core.config import get_settings


def main():
    """Run the server"""
    settings = get_settings()

    print(f"Starting {settings.app_name} on {settings.server_host}:{settings.server_port}")
    print(f"Debug mode: {settings.debug}")
    print("-" * 50)

    uvicorn.run(
        "ai_caller.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )


if __name__ == "__main__":
    main()
