import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .logging_config import setup_logging
from .repositories import InMemoryTodoStore, Repository
from .routers import admin as admin_router
from .routers import todos as todos_router
from .service import TodoService
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "todos",
        "description": "Personal todo items with filtering, search and sorting.",
    },
    {"name": "admin", "description": "Cross-user listing and statistics (ADMIN role)."},
]


# Global exception handler for consistent JSON on validation errors
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    logger.debug("Validation failed for %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": _jsonable_errors(exc),
        },
    )


def _jsonable_errors(exc: RequestValidationError) -> list:
    """Validation error details without 'ctx', which may hold the raised ValueError."""
    return [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]


def health_check(request: Request):
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health.
    """
    return {"message": "Healthy", "todos": len(request.app.state.store.list_all())}


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, repository: Optional[Repository] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Each application owns one record store and one TodoService, kept on
    app.state, so separate apps never share todos.

    Args:
        settings: Settings to use; read from the environment when omitted.
        repository: Record store to use; a fresh InMemoryTodoStore when omitted.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(
        title=settings.app_title,
        description="Multi-user todo tracking service with per-user isolation and admin statistics.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )

    store = repository or InMemoryTodoStore()
    app.state.settings = settings
    app.state.store = store
    app.state.service = TodoService(store)

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_api_route("/", health_check, methods=["GET"], summary="Health Check", tags=["health"])

    # Include routers
    app.include_router(todos_router.router)
    app.include_router(admin_router.router)

    logger.info("Todo Tracker ready with %d configured user(s)", len(settings.users))
    return app


app = create_app()
