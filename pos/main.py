# Main application file



import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pos.database import engine, Base
from pos.core.rate_limiter import limiter
from pos.core.config import settings
from pos.routers import (
    categories,
    suppliers,
    products,
    sales,
    billing,
    dashboard,
)


# LOGGING CONFIGURATION

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
)

logger = logging.getLogger("pos")


# APP INIT

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Production schemas are managed by Alembic
    if settings.ENV == "development":
        Base.metadata.create_all(bind=engine)
        logger.info("Development database tables ensured")
    yield


app = FastAPI(
    title="Retail POS API",
    description="Catalog, billing and sales dashboard backend for a small retail shop",
    version="1.0.0",
    lifespan=lifespan,
)



# CORS

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type"],
)


# RATE LIMITING

app.state.limiter = limiter
app.add_exception_handler(
    RateLimitExceeded,
    _rate_limit_exceeded_handler
)


# REQUEST LOGGING MIDDLEWARE

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    duration = round((time.time() - start_time) * 1000, 2)

    logger.info(
        f"{request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Time: {duration}ms"
    )

    return response


# ROUTERS

app.include_router(categories.router)
app.include_router(suppliers.router)
app.include_router(products.router)
app.include_router(sales.router)
app.include_router(billing.router)
app.include_router(dashboard.router)



# ROOT

@app.get("/")
def root():
    logger.info("Health check endpoint called")
    return {"message": "Retail POS API is running"}
