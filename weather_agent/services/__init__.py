"""
Service modules for the Weather Agent
"""

from .comparison_summary import (
    CityConditions,
    build_comparison_prompt,
    summarize_comparison,
)

__all__ = [
    "CityConditions",
    "build_comparison_prompt",
    "summarize_comparison",
]
