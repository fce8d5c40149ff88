import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from tasktracker.api.errors import error_response, register_exception_handlers
from tasktracker.api.router import router as api_router
from tasktracker.config import Settings, settings as default_settings
from tasktracker.database import create_engine_from_settings, create_session_maker, init_db
from tasktracker.services.task_service import TaskService

logger = logging.getLogger("tasktracker.api")


def create_app(settings: Settings | None = None, *, engine: AsyncEngine | None = None) -> FastAPI:
    """Build the API around an explicitly constructed connection pool.

    Pass ``engine`` to run against a substitute database (tests do this);
    otherwise one is created from ``settings.database_url``.
    """

    settings = settings or default_settings
    engine = engine or create_engine_from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.create_schema_on_startup:
            await init_db(engine)
        logger.info("startup database=%s pool_size=%s", engine.url.render_as_string(), settings.db_pool_size)
        yield
        await engine.dispose()

    app = FastAPI(title="Task Tracker API", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)
    app.state.task_service = TaskService()

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Attach a request id to every response and log a compact access line.

        - If the caller provides X-Request-ID, we reuse it.
        - Otherwise we generate a UUID4.
        """

        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # Answer here rather than in ServerErrorMiddleware so the 500 still
            # gets the access line and CORS headers.
            logger.exception("unhandled_exception request_id=%s", request_id)
            response = error_response(request, 500, "Internal Server Error")
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "access request_id=%s method=%s path=%s status=%s duration_ms=%.2f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    # Added last so it wraps everything, error responses included.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
