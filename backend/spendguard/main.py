import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import CORS_ORIGINS
from .database import init_db
from .errors import SpendguardError
from .logging_config import setup_logging
from .routers import ai, goals, purchases, savings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Server starting... checking tables.")
    await init_db()
    yield
    logger.info("Server shutting down.")

app = FastAPI(title="Spendguard API", lifespan=lifespan)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SpendguardError)
async def handle_domain_error(request: Request, exc: SpendguardError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Register Routers
app.include_router(goals.router)
app.include_router(purchases.router)
app.include_router(savings.router)
app.include_router(ai.router)


@app.get("/health")
def health():
    return {"status": "ok"}
