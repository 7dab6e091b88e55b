"""Persist the library views in the database for plain SQL clients."""
import logging

from sqlalchemy import func
from sqlalchemy.engine import Engine

from app.core.database import Base
from app.views.registry import VIEWS, Capability

logger = logging.getLogger("librarydb.ddl")

# engines that enforce WITH CHECK OPTION themselves
_CHECK_OPTION_DIALECTS = {"mysql", "mariadb", "postgresql"}


def view_sql(name: str, engine: Engine) -> str:
    view = VIEWS[name]
    # the stored view must read the engine's clock, not a date frozen at creation
    params = {"today": func.current_date()} if name == "overdue_books" else {}
    stmt = view.query(**params)
    sql = str(stmt.compile(dialect=engine.dialect, compile_kwargs={"literal_binds": True}))
    if view.capability is Capability.CHECK_OPTION and engine.dialect.name in _CHECK_OPTION_DIALECTS:
        sql += " WITH CHECK OPTION"
    return sql


def create_views(engine: Engine):
    """Drop and recreate every view, so re-running picks up new definitions."""
    with engine.begin() as conn:
        for name in VIEWS:
            conn.exec_driver_sql(f"DROP VIEW IF EXISTS {name}")
            conn.exec_driver_sql(f"CREATE VIEW {name} AS {view_sql(name, engine)}")
            logger.debug(f"Created view {name}")


def create_schema(engine: Engine):
    """Create tables (if missing) and the views on top of them."""
    logger.info("Creating database tables and views (if not present)...")
    Base.metadata.create_all(bind=engine)
    create_views(engine)
