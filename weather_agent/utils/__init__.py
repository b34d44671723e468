"""
Utility modules for the Weather Agent
"""

from .logging import configure_logging

__all__ = [
    "configure_logging",
]
