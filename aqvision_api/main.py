"""
FastAPI Application - Main Entry Point

Provides REST API for:
- Ground-sensor PM2.5 aggregation (OpenAQ)
- Weather and air-pollution passthrough (OpenWeather)
- AI insight generation (OpenAI Chat Completions)
- Google Maps loader proxy and demo pollution grid
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aqvision_api import __version__
from aqvision_api.routers import ai, data, maps
from aqvision_api.schemas import HealthResponse
from aqvision_api.services import MapsScriptService, OpenAIAdapter, OpenAQService, OpenWeatherService
from aqvision_core.config import Settings, get_settings
from aqvision_core.exceptions import AQVisionError
from aqvision_core.logger import logger


INTERNAL_ERROR_MESSAGE = "Internal server error"


# API Tags for documentation organization
tags_metadata = [
    {
        "name": "Health",
        "description": "API health and configured providers",
    },
    {
        "name": "Live Data",
        "description": "Ground sensors (OpenAQ), weather and air pollution (OpenWeather)",
    },
    {
        "name": "AI Insights",
        "description": "Prompt proxy to the OpenAI Chat Completions API",
    },
    {
        "name": "Map",
        "description": "Google Maps loader proxy and demo pollution grid",
    },
]


def register_exception_handlers(app: FastAPI):
    """Convert every failure into a JSON ``{error, details?}`` body"""

    @app.exception_handler(AQVisionError)
    async def aqvision_error_handler(request: Request, exc: AQVisionError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        problems = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.warning(f"{request.method} {request.url.path} invalid parameters: {problems}")
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request parameters", "details": problems},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
        # Internal detail stays in the logs
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Build the application

    Args:
        settings: Resolved configuration (defaults to the cached environment settings)
        transport: Optional httpx transport for outbound calls (tests use MockTransport)
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management"""
        logger.info(f"Starting AQ-Vision API v{__version__} ({settings.environment})")

        for provider, configured in settings.configured_credentials.items():
            if not configured:
                logger.warning(f"No API key configured for {provider}")

        client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.api_request_timeout, connect=10.0),
            transport=transport,
        )
        app.state.settings = settings
        app.state.http_client = client
        app.state.openaq_service = OpenAQService(client, settings)
        app.state.openweather_service = OpenWeatherService(client, settings)
        app.state.openai_adapter = OpenAIAdapter(client, settings)
        app.state.maps_service = MapsScriptService(client, settings)

        yield

        await client.aclose()
        logger.info("Shutting down AQ-Vision API")

    app = FastAPI(
        title="AQ-Vision API",
        description="""
## 🌍 Air quality aggregation proxy

Fans out to third-party providers for one location and returns small,
stable JSON shapes to the dashboard:

| Endpoint | Provider | Shape |
|----------|----------|-------|
| `GET /api/openaq` | OpenAQ | `{mean, values, raw, meta}` |
| `GET /api/openweather` | OpenWeather | passthrough |
| `GET /api/ow-air` | OpenWeather | passthrough |
| `POST /api/openai` | OpenAI | `{text}` |

Errors are always `{error, details?}`; upstream failures keep the upstream
status code.
        """,
        version=__version__,
        lifespan=lifespan,
        openapi_tags=tags_metadata,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(data.router)
    app.include_router(ai.router)
    app.include_router(maps.router)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Service status and which provider keys are configured"""
        credentials = settings.configured_credentials
        # OpenAQ works without a key
        required = [credentials["openweather"], credentials["openai"], credentials["google_maps"]]
        return HealthResponse(
            status="healthy" if all(required) else "degraded",
            version=__version__,
            environment=settings.environment,
            credentials=credentials,
        )

    @app.get("/", tags=["Health"])
    async def root():
        """API root endpoint with basic info"""
        return {
            "name": "AQ-Vision API",
            "version": __version__,
            "docs": "/docs"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("aqvision_api.main:app", host=settings.host, port=settings.port)
