from sqlalchemy import Column, Integer, String

from app.database.base import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)


class ProductType(Base):
    __tablename__ = "types"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)


class Brand(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)


class Size(Base):
    __tablename__ = "sizes"

    id = Column(Integer, primary_key=True)
    label = Column(String, nullable=False, unique=True)


__all__ = ["Brand", "Category", "ProductType", "Size"]
