"""
Comparison Summary - a short narrative comparing two cities' weather

Library API for the compare page: the page fetches both cities' current
conditions from the weather provider and passes them to
``summarize_comparison``. The agent loop does not call it; it only sends
the app to the compare route.
"""

import logging
from typing import Any, Optional
from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from ..config import Settings, get_settings


logger = logging.getLogger(__name__)


UNAVAILABLE_TEXT = "AI comparison unavailable (Missing API Key)."
FAILED_TEXT = "Unable to generate AI comparison at this moment."


@dataclass(frozen=True)
class CityConditions:
    """Current conditions for one city, as shown on the compare page"""
    name: str
    country: str
    temperature: float  # °C
    feels_like: float  # °C
    condition: str
    humidity: int  # %
    wind_speed: float  # m/s

    def describe(self) -> str:
        return (
            f"Data for {self.name}:\n"
            f"- Temp: {self.temperature}°C (Feels like {self.feels_like}°C)\n"
            f"- Condition: {self.condition}\n"
            f"- Humidity: {self.humidity}%\n"
            f"- Wind: {self.wind_speed} m/s"
        )


def build_comparison_prompt(city_a: CityConditions, city_b: CityConditions) -> str:
    return (
        f"Compare the current weather in {city_a.name}, {city_a.country} "
        f"and {city_b.name}, {city_b.country}.\n\n"
        f"{city_a.describe()}\n\n"
        f"{city_b.describe()}\n\n"
        'Task: Briefly analyze which city has "better" weather for a general tourist today. '
        "Provide a 2-sentence summary. Be decisive but friendly."
    )


async def summarize_comparison(
    city_a: CityConditions,
    city_b: CityConditions,
    settings: Optional[Settings] = None,
    client: Optional[Any] = None,
) -> str:
    """
    Ask the model which city has the better weather today.

    Never raises: a missing key or a failed request returns a fixed
    fallback sentence instead.
    """
    settings = settings or get_settings()

    if client is None:
        if not settings.openai_api_key:
            return UNAVAILABLE_TEXT
        client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.request_timeout,
        )

    try:
        response = await client.chat.completions.create(
            model=settings.openai_model,
            messages=[{"role": "user", "content": build_comparison_prompt(city_a, city_b)}],
            temperature=settings.temperature,
        )
    except openai.OpenAIError as e:
        logger.error("Comparison summary failed: %s", e)
        return FAILED_TEXT

    if not response.choices or not response.choices[0].message.content:
        return FAILED_TEXT

    return response.choices[0].message.content.strip()
