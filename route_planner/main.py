# path: route_planner/main.py

from typing import Optional

from fastapi import FastAPI

from route_planner.api.routes.routes import router as route_router
from route_planner.config import Settings, settings as default_settings
from route_planner.logging_config import configure
from route_planner.services.geocoding_client import GeocodingClient
from route_planner.services.route_session import RouteSession


def create_app(
    settings: Optional[Settings] = None, geocoder: Optional[GeocodingClient] = None
) -> FastAPI:
    settings = settings or default_settings
    configure(settings.log_level)

    app = FastAPI(title="loop-route-planner", version=settings.api_version)
    app.state.settings = settings
    app.state.route_session = RouteSession(closure_threshold_km=settings.closure_threshold_km)
    app.state.geocoder = geocoder or GeocodingClient(
        base_url=settings.geocoder_url,
        timeout=settings.geocoder_timeout_s,
        limit=settings.search_result_limit,
        min_query_length=settings.search_min_query_length,
        user_agent=settings.geocoder_user_agent,
    )

    app.include_router(route_router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": settings.api_version}

    @app.get("/config")
    async def client_config():
        return {
            "center": {"lat": settings.default_center_lat, "lng": settings.default_center_lng},
            "zoom": settings.default_zoom,
            "search": {
                "debounce_s": settings.search_debounce_s,
                "min_query_length": settings.search_min_query_length,
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
