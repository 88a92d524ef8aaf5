# storefront/data/models/kv_entry.py
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Text

from storefront.data.database import Base


class KeyValueModel(Base):
    __tablename__ = "kv_entries"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
