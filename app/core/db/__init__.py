from app.core.db.config import (
    Base,
    create_db_engine,
    create_session_factory,
    dispose_db,
    init_db,
    pool_status,
)

__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "dispose_db",
    "init_db",
    "pool_status",
]
