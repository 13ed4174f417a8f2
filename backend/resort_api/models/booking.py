"""
Booking model: one guest reservation against an accommodation.

Rows are written once by the booking transaction and never updated by the
API. Optional counts stay NULL when the guest did not send them.
"""

from sqlalchemy import Column, Integer, String, Date, Numeric, ForeignKey, Index, CheckConstraint

from resort_api.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    booking_id = Column(Integer, primary_key=True, index=True)
    accommodation_id = Column(Integer, ForeignKey("accommodations.id"), nullable=False)
    package_id = Column(Integer, ForeignKey("packages.id"), nullable=True)

    guest_name = Column(String(255), nullable=False)
    guest_email = Column(String(255), nullable=False)
    guest_phone = Column(String(50), nullable=True)

    rooms = Column(Integer, nullable=False)
    adults = Column(Integer, nullable=False)
    children = Column(Integer, nullable=True)
    food_veg = Column(Integer, nullable=True)
    food_nonveg = Column(Integer, nullable=True)
    food_jain = Column(Integer, nullable=True)

    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)

    total_amount = Column(Numeric(10, 2), nullable=True)
    advance_amount = Column(Numeric(10, 2), nullable=True)
    coupon_code = Column(String(50), nullable=True)

    __table_args__ = (
        CheckConstraint("rooms > 0", name="check_booking_rooms_positive"),
        CheckConstraint("check_out > check_in", name="check_booking_dates_ordered"),
        # Overlap lookups under the accommodation lock filter on these
        Index("ix_bookings_accommodation_stay", "accommodation_id", "check_in", "check_out"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.booking_id}, accommodation={self.accommodation_id}, "
            f"rooms={self.rooms}, {self.check_in}..{self.check_out})>"
        )
