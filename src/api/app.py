from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(
        status_code=exc.status_code, content={"error": error_dict}, headers=exc.headers
    )


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def create_app(ApplicationConfig) -> FastAPI:
    from src.adapter.services.reminder_job import build_job_scheduler
    from src.depends import credential_store, reminder_scheduler

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        jobs = None
        if ApplicationConfig.SCHEDULER_ENABLED:
            jobs = build_job_scheduler(reminder_scheduler, credential_store)
            jobs.start()
            logger.info("Reminder scheduler started")
        try:
            yield
        finally:
            if jobs is not None:
                jobs.shutdown(wait=False)
                logger.info("Reminder scheduler stopped")

    app = FastAPI(title="Task Reminders API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import auth, health_check, password, reminders, verification

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(verification.router, tags=["Email Verification"])
    app.include_router(password.router, tags=["Password Reset"])
    app.include_router(reminders.router, tags=["Reminders"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
