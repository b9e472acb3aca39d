"""AgriLink API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map AgriLinkError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Uploaded files served from the upload directory under /uploads
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from agrilink.api.error_handlers import register_error_handlers
from agrilink.api.routes import (
    admin, auth, catalog, chat, health, maintenance, notifications, offers,
    products, reviews, seller_options, users, verification,
)
from agrilink.config import get_settings
from agrilink.infrastructure.database import close_db, init_db
from agrilink.infrastructure.file_storage import PUBLIC_PREFIX
from agrilink.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("AgriLink API started")
    yield
    logger.info("AgriLink API shutting down")
    await close_db()


app = FastAPI(title="AgriLink API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(catalog.router)
app.include_router(products.router)
app.include_router(offers.router)
app.include_router(reviews.router)
app.include_router(chat.router)
app.include_router(notifications.router)
app.include_router(verification.router)
app.include_router(users.router)
app.include_router(seller_options.router)
app.include_router(maintenance.router)
app.include_router(admin.router)

Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount(PUBLIC_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")

register_error_handlers(app)
