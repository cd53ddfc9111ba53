"""
Life RPG FastAPI Application Entry Point
FastAPI 应用入口
"""

from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.config import settings
from app.dependencies import get_session_cache
from app.exceptions import InvariantError, StorageError, ValidationError
from app.routers import setup_sessions_router, users_router
from app.utils.logger import get_logger
from app.utils.rate_limit import limiter

logger = get_logger(__name__)

# Create FastAPI application / 创建 FastAPI 应用
app = FastAPI(
    title="Life RPG API",
    description="Gamified habit tracking: account setup engine / 游戏化习惯追踪：账户设置引擎",
    version="0.1.0",
    debug=settings.debug,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """User-correctable input errors, returned with their field messages."""
    logger.info("Validation failed on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "errors": exc.field_errors},
    )


@app.exception_handler(InvariantError)
async def invariant_exception_handler(request: Request, exc: InvariantError):
    """Internal invariant violations are defects; never expose details."""
    logger.critical("Invariant violated on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Storage temporarily unavailable"})


# Global exception handler: never leak internal details to clients
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and return a safe 500 response."""
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Configure CORS / 配置跨域
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers / 注册路由
# Strategy: Dual Mount
# Mount at root "/" for Dev mode (where the dev proxy strips /api)
# Mount at "/api" for Prod mode (where the frontend calls /api directly)
routers = [
    setup_sessions_router,
    users_router,
]

for router in routers:
    app.include_router(router)                  # Dev: http://localhost:8000/setup/sessions
    app.include_router(router, prefix="/api")   # Prod: http://localhost:8000/api/setup/sessions


@app.get("/health")
async def health_check():
    """Health check endpoint / 健康检查"""
    data_dir = Path(settings.data_dir)
    return {
        "status": "ok",
        "version": app.version,
        "storage_accessible": data_dir.exists(),
        "setup_sessions": get_session_cache().get_stats(),
    }


if __name__ == "__main__":
    import uvicorn

    logger.info("Running in %s mode", "Dev" if settings.debug else "Prod")
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
