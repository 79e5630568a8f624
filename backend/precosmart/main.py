import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from precosmart.core.config import settings
from precosmart.routes.auth import router as auth_router
from precosmart.routes.categories import item_categories_router, product_categories_router
from precosmart.routes.health import router as health_router
from precosmart.routes.items import router as items_router
from precosmart.routes.organizations import router as organizations_router
from precosmart.routes.products import router as products_router
from precosmart.routes.session import router as session_router
from precosmart.core.database import SessionLocal, init_db
from precosmart.services.seed import seed_demo


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="PreçoSmart API", version="0.1.0")

    origins = settings.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router, prefix="/auth", tags=["auth"])
    app.include_router(session_router, prefix="/session", tags=["session"])
    app.include_router(organizations_router, prefix="/organizations", tags=["organizations"])
    app.include_router(item_categories_router, prefix="/item-categories", tags=["items"])
    app.include_router(items_router, prefix="/items", tags=["items"])
    app.include_router(product_categories_router, prefix="/product-categories", tags=["products"])
    app.include_router(products_router, prefix="/products", tags=["products"])

    return app


app = create_app()

# Only seed in development or when explicitly requested
if settings.env == "dev" or os.getenv("FORCE_SEED") == "true":
    try:
        init_db()
        with SessionLocal() as db:
            seed_demo(db)
    except Exception:
        logging.getLogger(__name__).exception("demo seed failed")
