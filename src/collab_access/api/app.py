"""FastAPI application factory."""

from fastapi import FastAPI

from collab_access.api.errors import register_error_handlers
from collab_access.api.guest import router as guest_router
from collab_access.api.sessions import router as sessions_router
from collab_access.api.shares import router as shares_router
from collab_access.app_logging import configure_logging
from collab_access.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    app = FastAPI(title="collab-access")
    app.state.container = container
    register_error_handlers(app)

    # Owner routes first: the guest router matches any /collaboration/{kind}.
    app.include_router(sessions_router)
    app.include_router(shares_router)
    app.include_router(guest_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
