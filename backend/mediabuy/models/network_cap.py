from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from mediabuy.db.base import Base


class NetworkCap(Base):
    __tablename__ = "network_caps"
    __table_args__ = (UniqueConstraint("network", "offer", name="uq_network_caps_pair"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    network: Mapped[str] = mapped_column(String(255), nullable=False)
    offer: Mapped[str] = mapped_column(String(255), nullable=False)
    daily_cap: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
