"""Side table of Salesforce ids for entities using mapping-table identification.

One row per (entity_type, entity_id). entity_type is the fully-qualified
local class name; entity_id is stored as text so any primary key type fits.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from src.salesforce_sync.core.database import Base


class SalesforceMappingModel(Base):
    """Association of a local entity with its Salesforce record."""

    __tablename__ = "salesforce_mappings"
    __table_args__ = (
        UniqueConstraint(
            "entity_type",
            "entity_id",
            name="uq_salesforce_mapping_entity",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type: Mapped[str] = mapped_column(String(255), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(255), nullable=False)
    salesforce_id: Mapped[str] = mapped_column(String(18), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
    )
