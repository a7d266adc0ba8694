"""
DesiConnect - Backend API
Marketplace connecting Indian sellers with customers, moderated by admins
"""
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables before settings are read
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from desiconnect.api import admin, auth, customer, orders, products, seller
from desiconnect.core.config import settings
from desiconnect.core.database import SessionLocal, check_connection_with_retry, init_db
from desiconnect.domain.errors import DomainError
from desiconnect.services.bootstrap import seed_default_accounts
from desiconnect.services.upload_service import PUBLIC_PREFIX, ensure_upload_dir

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, the uploads directory and the default accounts"""
    init_db()
    ensure_upload_dir()

    if settings.SEED_DEFAULT_ACCOUNTS:
        db = SessionLocal()
        try:
            created = seed_default_accounts(db)
            logger.info(f"Seeded {created} default account(s)")
        finally:
            db.close()

    logger.info(f"{settings.API_TITLE} started ({settings.ENVIRONMENT})")
    yield


# =============================================================================
# Error handlers: every error body is {"message": ...}
# =============================================================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "message": "Validation error",
            "errors": [
                {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
                for error in exc.errors()
            ],
        },
    )


async def domain_exception_handler(request: Request, exc: DomainError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Database error"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        description=settings.API_DESCRIPTION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DomainError, domain_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Include API routers
    app.include_router(auth.router)
    app.include_router(admin.router)
    app.include_router(seller.router)
    app.include_router(customer.router)
    app.include_router(products.router)
    app.include_router(orders.router)

    # Product images
    app.mount(PUBLIC_PREFIX, StaticFiles(directory=ensure_upload_dir()), name="uploads")

    @app.get("/")
    async def root():
        """Root endpoint - API status"""
        return {
            "message": "DesiConnect API",
            "status": "online",
            "version": settings.API_VERSION,
        }

    @app.get("/health")
    def health():
        """Health check for monitoring - tests database connectivity"""
        start_time = time.time()

        db_latency_ms = None
        db_error = None
        try:
            db_latency_ms = check_connection_with_retry(max_retries=1, retry_delay=0.5)
            db_status = "connected"
        except SQLAlchemyError as e:
            db_status = "disconnected"
            db_error = str(e)

        return {
            "status": "healthy" if db_status == "connected" else "degraded",
            "service": "desiconnect-api",
            "version": settings.API_VERSION,
            "database": {
                "status": db_status,
                "latency_ms": db_latency_ms,
                "error": db_error,
            },
            "total_latency_ms": round((time.time() - start_time) * 1000, 2),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "desiconnect.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_DEBUG,
    )
