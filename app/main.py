import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import listeners  # noqa: F401 - registers ORM event listeners
from . import models  # noqa: F401 - registers tables with Base
from .config import ALLOWED_ORIGINS, SECURITY_HEADERS_ENABLED, SITE_NAME
from .database import Base, engine
from .domain.appeals.router import router as appeals_router
from .domain.catalog.router import categories_router, units_router
from .domain.chats.router import messages_router as chat_messages_router
from .domain.chats.router import router as chats_router
from .domain.favorites.router import black_lists_router, favorites_router
from .domain.reviews.router import router as reviews_router
from .domain.tech_support.router import messages_router as tech_support_messages_router
from .domain.tech_support.router import router as tech_support_router
from .domain.tickets.router import router as tickets_router
from .domain.users.router import auth_router
from .domain.users.router import router as users_router
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Several workers may race on the first start
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield
    logger.info("Application shutting down...")


app = FastAPI(title=f"{SITE_NAME} API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    A missing or malformed Authorization header is reported as 401, any
    other validation problem as 422
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(f"Authentication failed for {request.url.path}: missing Authorization header")
            return JSONResponse(status_code=401, content={"detail": "Authentication required"})

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Stack traces go to the log, never to the client"""
    logger.exception(f"{request.method} {request.url.path} - Unhandled error: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"])
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(categories_router)
app.include_router(units_router)
app.include_router(tickets_router)
app.include_router(chats_router)
app.include_router(chat_messages_router)
app.include_router(reviews_router)
app.include_router(tech_support_router)
app.include_router(tech_support_messages_router)
app.include_router(appeals_router)
app.include_router(favorites_router)
app.include_router(black_lists_router)


@app.get("/")
def root():
    return {"message": f"{SITE_NAME} API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
