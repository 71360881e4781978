from app.database.base import Base
from app.database.engine import create_catalog_engine, engine, init_schema
from app.database.session import SessionLocal, get_db

__all__ = ["Base", "SessionLocal", "create_catalog_engine", "engine", "get_db", "init_schema"]
