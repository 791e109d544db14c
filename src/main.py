import src.models
from src.auth.router import router as auth_router
from src.users.router import router as users_router
from src.posts.router import router as posts_router
from src.engagement.router import router as engagement_router
from src.comments.router import router as comments_router
from src.admin.router import router as admin_router
from src.notifications.router import router as notifications_router, ws_router
from src.config import settings
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from dotenv import load_dotenv
import logging
from pathlib import Path

from src.utils.logging import configure_logging

# Load environment variables from .env file
load_dotenv()

# Configure logging from logging.ini file
logging_config_path = Path(__file__).parent.parent / "logging.ini"
if configure_logging(logging_config_path, settings.LOG_FILE, settings.LOG_LEVEL):
    print(f"[Startup] Logging configured from {logging_config_path}")
else:
    print(
        f"[Startup] Logging config file not found at {logging_config_path}, using basic configuration"
    )

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    swagger_ui_parameters={"docExpansion": "none"}
)

# Add CORS middleware
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin)
                       for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Include routers
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(posts_router, prefix=settings.API_PREFIX)
app.include_router(engagement_router, prefix=settings.API_PREFIX)
app.include_router(comments_router, prefix=settings.API_PREFIX)
app.include_router(admin_router, prefix=settings.API_PREFIX)
app.include_router(notifications_router, prefix=settings.API_PREFIX)

# Realtime relay lives at /ws, outside the API prefix
app.include_router(ws_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Invalid bodies and parameters are client errors, reported as 400
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"detail": exc.errors()}),
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database operation failed"},
    )

# Root endpoint


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}!",
        "version": settings.VERSION,
        "docs": "/docs",
        "redoc": "/redoc"
    }

# Health check endpoint


@app.get("/health")
async def health_check():
    return {"status": "ok"}

# Startup event


@app.on_event("startup")
async def startup_event():
    logger.info("Application starting up...")

    # Optional: auto run alembic migrations on startup
    if settings.AUTO_MIGRATE_ON_STARTUP:
        try:
            import subprocess
            subprocess.run(["alembic", "upgrade", "head"], check=True)
            logger.info("[Startup] Alembic migrations applied")
        except Exception as e:
            logger.error(f"[Startup] Alembic migration failed: {e}")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
