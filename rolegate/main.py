"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rolegate.api import router as api_router
from rolegate.api.errors import register_exception_handlers
from rolegate.core.config import settings
from rolegate.core.logs import configure_logging
from rolegate.middleware import TRANSACTION_ID_HEADER, TransactionIdMiddleware

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Rolegate API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[TRANSACTION_ID_HEADER],
)
# Added last so it runs first: CORS preflights get a transaction ID too.
app.add_middleware(TransactionIdMiddleware)

register_exception_handlers(app)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Rolegate API"}
