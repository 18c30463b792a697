"""SQLAlchemy implementations of the mapping collaborators."""

from src.salesforce_sync.orm.adapter import (
    SqlAlchemyFieldAccessor,
    SqlAlchemyMappingStore,
    SqlAlchemyPersistence,
)
from src.salesforce_sync.orm.models import SalesforceMappingModel

__all__ = [
    "SalesforceMappingModel",
    "SqlAlchemyFieldAccessor",
    "SqlAlchemyMappingStore",
    "SqlAlchemyPersistence",
]
