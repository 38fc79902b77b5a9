import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from lovculator.core.config import settings
from lovculator.core.logging_config import setup_logging
from lovculator.database import engine, Base
from lovculator.services.exceptions import FollowServiceError
from lovculator.api.v1 import follow, users
import lovculator.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s started", settings.APP_NAME, settings.VERSION)
    yield


async def follow_service_error_handler(request: Request, exc: FollowServiceError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE or None, sql_echo=settings.DATABASE_ECHO)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Follow graph API for Lovculator",
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FollowServiceError, follow_service_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Include routers
    app.include_router(follow.router, prefix=f"{settings.API_PREFIX}/follow", tags=["Follow"])
    app.include_router(users.router, prefix=f"{settings.API_PREFIX}/users", tags=["Users"])

    @app.get("/")
    def root():
        return {
            "message": "Welcome to Lovculator Follow API",
            "version": settings.VERSION,
            "docs": "/docs",
            "redoc": "/redoc"
        }

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("lovculator.main:app", host="0.0.0.0", port=8000, reload=True)
