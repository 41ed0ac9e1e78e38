from typing import Optional

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from pizzeria.app.customer_routes import router as customer_router
from pizzeria.app.dashboard.base import router as admin_router
from pizzeria.app.realtime import router as realtime_router
from pizzeria.app.sessions import SessionRegistry
from pizzeria.infra import db
from pizzeria.infra.changes import ChangeFeed
from pizzeria.infra.logs import setup_logging
from pizzeria.infra.menu import load_json_catalog
from pizzeria.infra.orders import OrderStore
from pizzeria.infra.settings import is_dev


def create_app(engine: Optional[Engine] = None,
               feed: Optional[ChangeFeed] = None,
               menu_json: Optional[str] = None) -> FastAPI:
    app = FastAPI(title="Pizzeria")
    app.state.engine = engine or db.engine
    app.state.feed = feed or ChangeFeed()
    app.state.store = OrderStore(app.state.engine, app.state.feed)
    app.state.sessions = SessionRegistry()

    @app.on_event("startup")
    def _init():
        db.init_db(app.state.engine)
        setup_logging(app.state.engine)
        app.state.menu_fallback = load_json_catalog(menu_json)

    @app.get("/")
    def read_root():
        return {"status": "ok", "message": "Pizzeria backend actief",
                "mode": "dev" if is_dev() else "prod"}

    @app.get("/healthz")
    def health():
        return {"ok": True}

    app.include_router(customer_router)
    app.include_router(admin_router)
    app.include_router(realtime_router)
    return app


app = create_app()
