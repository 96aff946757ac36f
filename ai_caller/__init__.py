"""AI Caller - voice agent configuration and response generation API"""

__version__ = "1.0.0"
