import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flowershop.config import Settings, settings as default_settings
from flowershop.database import Database
from flowershop.errors import register_exception_handlers
from flowershop.middleware.request_logging import RequestLoggingMiddleware
from flowershop.routes import (
    admin,
    auth,
    cart,
    categories,
    files,
    flowers,
    health,
    orders,
    products,
    reviews,
    subcategories,
    users,
)
from flowershop.utils.log_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or default_settings
    database = database or Database(settings.database_url, echo=settings.sql_echo)

    setup_logging(settings.log_level, settings.log_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.open()
        # Run DB creation ONLY in local, Alembic owns the schema elsewhere
        if settings.env == "local":
            database.create_all()
        logger.info("Flower shop API started (env=%s)", settings.env)
        try:
            yield
        finally:
            database.close()

    app = FastAPI(title="Flower Shop API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.db = database

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router, prefix="/api/health", tags=["Health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])
    app.include_router(subcategories.router, prefix="/api/subcategories", tags=["Subcategories"])
    app.include_router(products.router, prefix="/api/products", tags=["Products"])
    app.include_router(flowers.router, prefix="/api/flowers", tags=["Flowers"])
    app.include_router(reviews.router, prefix="/api/reviews", tags=["Reviews"])
    app.include_router(files.router, prefix="/api/files", tags=["Files"])
    app.include_router(cart.router, prefix="/api/cart", tags=["Cart"])
    app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
    app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

    @app.get("/")
    def root():
        return {
            "auth_endpoints": [
                "/api/auth/register", "/api/auth/login", "/api/auth/logout",
                "/api/auth/me", "/api/auth/password"
            ],
            "user_endpoints": [
                "/api/users/addresses", "/api/users/holidays"
            ],
            "catalog": [
                "/api/categories", "/api/subcategories", "/api/products",
                "/api/products/popular", "/api/products/top-rated", "/api/flowers"
            ],
            "reviews": [
                "/api/reviews", "/api/reviews/{review_id}", "/api/reviews/parent/{parent_id}"
            ],
            "cart": [
                "/api/cart", "/api/cart/{item_id}"
            ],
            "orders": [
                "/api/orders", "/api/orders/{order_id}", "/api/orders/{order_id}/cancel"
            ],
            "admin": [
                "/api/admin/stats", "/api/admin/users", "/api/admin/active-users",
                "/api/admin/forms", "/api/orders/admin/all"
            ]
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("flowershop.main:app", host="0.0.0.0", port=8000)
