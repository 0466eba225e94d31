"""
AQ-Vision Aggregation Proxy

FastAPI backend that:
- Fans out to OpenAQ and OpenWeather for ground, pollution and weather data
- Forwards synthesized prompts to the OpenAI chat-completion API
- Serves the Google Maps loader without exposing the key to the browser
"""

from aqvision_core import __version__

__all__ = ["__version__"]
