"""SQLAlchemy declarative Base for the credential store."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Constraint names shared by Base.metadata.create_all and the alembic migrations.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base for the store's ORM models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
