import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from subsync.core.config import settings
from subsync.core.errors import register_exception_handlers
from subsync.core.logging_config import configure_logging
from subsync.db.session import init_db

# Import routers
from subsync.api.auth import router as auth_router
from subsync.api.plans import router as plans_router
from subsync.api.subscriptions import router as subscriptions_router
from subsync.api.billing import router as billing_router
from subsync.api.discounts import router as discounts_router
from subsync.api.inbox import router as inbox_router
from subsync.api.admin import router as admin_router
from subsync.api.pages import router as pages_router

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.db_auto_create:
        init_db()
    logger.info("%s started (env=%s)", settings.app_name, settings.app_env)
    yield

def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    register_exception_handlers(app)

    @app.get("/health")
    def health():
        return {"status" : "ok", "env" : settings.app_env}

    # JSON API
    app.include_router(auth_router)
    app.include_router(plans_router)
    app.include_router(subscriptions_router)
    app.include_router(billing_router)
    app.include_router(discounts_router)
    app.include_router(inbox_router)
    app.include_router(admin_router)
    # Page routes (guard -> dashboard shell -> view)
    app.include_router(pages_router)

    return app

app = create_app()
