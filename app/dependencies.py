from app.database.session import get_db
from app.services.storage_service import get_storage

__all__ = ["get_db", "get_storage"]
