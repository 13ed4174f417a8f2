"""Initial schema: catalog tables, accommodations, packages and bookings.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "accommodations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("rooms", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("features", sa.Text(), nullable=True),
        sa.Column("images", sa.Text(), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("rooms >= 0", name="check_accommodation_rooms_non_negative"),
    )
    op.create_index("ix_accommodations_id", "accommodations", ["id"])
    op.create_index("ix_accommodations_type", "accommodations", ["type"])

    op.create_table(
        "packages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("accommodation_id", sa.Integer(), sa.ForeignKey("accommodations.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("duration", sa.String(100), nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("includes", sa.Text(), nullable=True),
        sa.Column("detailed_info", sa.Text(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_packages_id", "packages", ["id"])
    op.create_index("ix_packages_accommodation_id", "packages", ["accommodation_id"])

    op.create_table(
        "bookings",
        sa.Column("booking_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("accommodation_id", sa.Integer(), sa.ForeignKey("accommodations.id"), nullable=False),
        sa.Column("package_id", sa.Integer(), sa.ForeignKey("packages.id"), nullable=True),
        sa.Column("guest_name", sa.String(255), nullable=False),
        sa.Column("guest_email", sa.String(255), nullable=False),
        sa.Column("guest_phone", sa.String(50), nullable=True),
        sa.Column("rooms", sa.Integer(), nullable=False),
        sa.Column("adults", sa.Integer(), nullable=False),
        sa.Column("children", sa.Integer(), nullable=True),
        sa.Column("food_veg", sa.Integer(), nullable=True),
        sa.Column("food_nonveg", sa.Integer(), nullable=True),
        sa.Column("food_jain", sa.Integer(), nullable=True),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("advance_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("coupon_code", sa.String(50), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("rooms > 0", name="check_booking_rooms_positive"),
        sa.CheckConstraint("check_out > check_in", name="check_booking_dates_ordered"),
    )
    op.create_index("ix_bookings_booking_id", "bookings", ["booking_id"])
    # The availability check sums overlapping stays for one accommodation
    # while holding its row lock; this index keeps that lock window short.
    op.create_index(
        "ix_bookings_accommodation_stay", "bookings", ["accommodation_id", "check_in", "check_out"]
    )

    op.create_table(
        "meal_plans",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("diet_type", sa.String(20), nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_meal_plans_id", "meal_plans", ["id"])

    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.String(100), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_activities_id", "activities", ["id"])

    op.create_table(
        "faqs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )
    op.create_index("ix_faqs_id", "faqs", ["id"])

    op.create_table(
        "gallery_images",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("image_url", sa.String(500), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_gallery_images_id", "gallery_images", ["id"])

    op.create_table(
        "testimonials",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("guest_name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("image", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_testimonials_id", "testimonials", ["id"])

    op.create_table(
        "nearby_locations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("distance", sa.String(100), nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_nearby_locations_id", "nearby_locations", ["id"])


def downgrade() -> None:
    op.drop_table("nearby_locations")
    op.drop_table("testimonials")
    op.drop_table("gallery_images")
    op.drop_table("faqs")
    op.drop_table("activities")
    op.drop_table("meal_plans")
    op.drop_table("bookings")
    op.drop_table("packages")
    op.drop_table("accommodations")
