import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskapi.core.config import Settings, get_settings
from taskapi.core.database import create_engine, init_db
from taskapi.core.exceptions import DataAccessError, TaskNotFoundError
from taskapi.core.logging_config import configure_logging
from taskapi.repositories.tasks import TaskRepository
from taskapi.routers import tasks

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        settings = get_settings()
    engine = create_engine(settings)

    app = FastAPI(title=settings.APP_NAME)
    app.state.settings = settings
    app.state.engine = engine
    app.state.repository = TaskRepository(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tasks.router)

    @app.exception_handler(TaskNotFoundError)
    async def task_not_found_handler(request: Request, exc: TaskNotFoundError):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Task not found"},
        )

    @app.exception_handler(DataAccessError)
    async def data_access_error_handler(request: Request, exc: DataAccessError):
        # Details were logged by the repository
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Database error"},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "detail": jsonable_encoder(exc.errors())},
        )

    @app.on_event("startup")
    async def startup():
        # Not guarded: a schema failure aborts startup
        await init_db(engine)
        logger.info("Server running on http://%s:%s", settings.HOST, settings.PORT)

    @app.on_event("shutdown")
    async def shutdown():
        await engine.dispose()

    @app.get("/")
    async def root():
        return {"message": "Task API is running"}

    return app


def run():
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "taskapi.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
