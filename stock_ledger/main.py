"""
Stock Ledger — FastAPI Application.

create_app() builds the application around an explicitly owned
storage handle and product lock registry. All routers are
registered here.
"""

from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from stock_ledger.config import Settings, get_settings
from stock_ledger.logging_config import configure_logging
from stock_ledger.models.base import Base, create_session_factory
from stock_ledger.services.locks import ProductLocks
from stock_ledger.api.health import router as health_router
from stock_ledger.api.products import router as products_router
from stock_ledger.api.stock import router as stock_router
from stock_ledger.api.reports import router as reports_router


def create_app(
    settings: Settings | None = None,
    session_factory: sessionmaker | None = None,
    create_tables: bool = False,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(level=settings.LOG_LEVEL, fmt=settings.LOG_FORMAT)

    if session_factory is None:
        session_factory = create_session_factory(
            settings.DATABASE_URL,
            lock_timeout=settings.LOCK_TIMEOUT_SECONDS,
            echo=settings.DEBUG,
        )
    if create_tables:
        Base.metadata.create_all(bind=session_factory.kw["bind"])

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Inventory stock ledger: catalog, stock movements, sales and reports",
    )
    app.state.session_factory = session_factory
    app.state.product_locks = ProductLocks(timeout=settings.LOCK_TIMEOUT_SECONDS)

    # Register routers
    app.include_router(health_router)
    app.include_router(products_router)
    app.include_router(stock_router)
    app.include_router(reports_router)

    return app


def run():
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings, create_tables=True),
        host=settings.HOST,
        port=settings.PORT,
    )
