"""
CareerBridge - Main Application

FastAPI backend with:
- MongoDB for users, jobs and applications
- JWT authentication with role-gated routes
- Admin approval of job postings

Run: uvicorn careerbridge.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from careerbridge import __version__
from careerbridge.api.routes import api_router
from careerbridge.core.config import configure_logging, get_settings
from careerbridge.core.errors import CareerBridgeError, StoreError
from careerbridge.db.mongodb import init_mongo_indexes, test_mongo_connection
from careerbridge.schemas.schemas import ErrorResponse

settings = get_settings()
configure_logging(settings)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="CareerBridge",
    description="""
    A job board connecting students, employers and administrators.

    ## Features
    - **Authentication**: JWT bearer tokens for students, employers and admins
    - **Employers**: Submit job postings, review applications
    - **Admins**: Approve or delete postings, manage users, create employers
    - **Students**: Browse approved jobs, apply, track application status
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(
    api_router,
    prefix="/api",
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)


@app.exception_handler(CareerBridgeError)
async def careerbridge_error_handler(request: Request, exc: CareerBridgeError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError):
    """Store failures outside a store_guard block (e.g. resolving the session)."""
    logger.exception("Unhandled document store error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=StoreError.status_code, content={"detail": StoreError.detail})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "CareerBridge", "version": __version__}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
