from app.core.db.crud.base import BaseDB

__all__ = [
    "BaseDB",
]
