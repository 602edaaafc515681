"""FastAPI application factory.

Read-only API layer:
- Runs aggregations and serves the persisted artifact
- Serves simulation comparison views
- Forbidden: writing the artifact, mutating result files
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from tally.config import Settings, load_settings


def get_settings(request: Request) -> Settings:
    """Dependency returning the settings the app was created with."""
    return request.app.state.settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Optional settings; defaults to load_settings().

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="Tally API",
        description="Strategy results aggregation",
        version="0.1.0",
    )
    app.state.settings = settings or load_settings()

    # Add CORS middleware for dashboard access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Include routes
    from tally.api.routes import aggregate, simulations

    app.include_router(aggregate.router, prefix="/api")
    app.include_router(simulations.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Default app instance
app = create_app()
