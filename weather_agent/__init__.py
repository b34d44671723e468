"""
Weather Agent - conversational tool-calling assistant for the weather app
"""

from .config import APP_NAME, APP_VERSION

__version__ = APP_VERSION
