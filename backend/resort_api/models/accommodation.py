"""
Accommodation and Package models.

Key design decisions:
- `rooms` is the fixed room capacity. The API never decrements it; remaining
  rooms are derived from overlapping bookings while the row is locked.
- `features`, `images`, `includes` and `detailed_info` hold JSON as text,
  the way the catalog has always been filled. Readers parse with a fallback.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from resort_api.db.base import Base, TimestampMixin


class Accommodation(Base, TimestampMixin):
    __tablename__ = "accommodations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    capacity = Column(Integer, nullable=True)
    rooms = Column(Integer, nullable=False, default=1)
    available = Column(Boolean, nullable=False, default=True)
    features = Column(Text, nullable=True)  # JSON array
    images = Column(Text, nullable=True)  # JSON array of URLs
    address = Column(String(500), nullable=True)

    packages = relationship("Package", back_populates="accommodation")

    __table_args__ = (
        CheckConstraint("rooms >= 0", name="check_accommodation_rooms_non_negative"),
        Index("ix_accommodations_type", "type"),
    )

    def __repr__(self) -> str:
        return f"<Accommodation(id={self.id}, name={self.name}, rooms={self.rooms}, available={self.available})>"


class Package(Base, TimestampMixin):
    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, index=True)
    accommodation_id = Column(Integer, ForeignKey("accommodations.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    duration = Column(String(100), nullable=True)
    image = Column(String(500), nullable=True)
    includes = Column(Text, nullable=True)  # JSON array
    detailed_info = Column(Text, nullable=True)  # JSON object
    active = Column(Boolean, nullable=False, default=True)

    accommodation = relationship("Accommodation", back_populates="packages")

    def __repr__(self) -> str:
        return f"<Package(id={self.id}, accommodation={self.accommodation_id}, active={self.active})>"
