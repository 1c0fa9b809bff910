# courier/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from courier.core.config import get_settings
from courier.core.errors import (
    InvalidStatusTransition,
    OrderNotFoundError,
    StorageError,
    SubmissionError,
    UserNotFoundError,
    ValidationError,
)
from courier.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from courier.models import user as _user_models  # noqa: F401
from courier.models import draft as _draft_models  # noqa: F401
from courier.models import order as _order_models  # noqa: F401

# Routers
from courier.routers.users import router as users_router
from courier.routers.drafts import router as drafts_router
from courier.routers.orders import router as orders_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
    """
    logger.info("🔄 Startup: Connecting to database...")
    try:
        create_db_and_tables()
        logger.info("✅ Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"❌ Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "Courier Booking API",
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Domain error handlers ---


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    # CapacityError is a ValidationError and lands here too
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": exc.message, "errors": exc.errors},
    )


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"message": exc.message},
    )


@app.exception_handler(SubmissionError)
async def submission_error_handler(request: Request, exc: SubmissionError):
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"message": exc.message},
    )


@app.exception_handler(UserNotFoundError)
@app.exception_handler(OrderNotFoundError)
async def not_found_handler(request: Request, exc: OrderNotFoundError | UserNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"message": exc.message},
    )


@app.exception_handler(InvalidStatusTransition)
async def invalid_transition_handler(request: Request, exc: InvalidStatusTransition):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": exc.message},
    )


# Versioned API prefix, e.g. /api/v1
app.include_router(users_router, prefix=settings.API_V1_STR)
app.include_router(drafts_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "courier-backend"}
