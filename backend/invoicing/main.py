from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoicing.core.config import settings
from invoicing.core.exceptions import register_exception_handlers
from invoicing.core.logging_config import configure_logging
from invoicing.routers import invoices

OPENAPI_TAGS = [
    {"name": "Invoices", "description": "Create, read, update, and delete shop invoices."},
]

configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Shop invoicing API. Creates invoices for a shop and customer, applies "
        "direct or percentage discounts and tax, and manages the invoice lifecycle."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)

register_exception_handlers(app)

app.include_router(invoices.router, prefix="/invoices", tags=["Invoices"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
