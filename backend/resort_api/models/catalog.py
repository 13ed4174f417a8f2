"""
Flat, read-only catalog tables shown on the marketing site.
"""

from sqlalchemy import Column, Integer, String, Text, Numeric

from resort_api.db.base import Base, TimestampMixin


class MealPlan(Base, TimestampMixin):
    __tablename__ = "meal_plans"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    diet_type = Column(String(20), nullable=True)  # veg, nonveg, jain
    image = Column(String(500), nullable=True)


class Activity(Base, TimestampMixin):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(String(100), nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    image = Column(String(500), nullable=True)


class Faq(Base, TimestampMixin):
    __tablename__ = "faqs"

    id = Column(Integer, primary_key=True, index=True)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    category = Column(String(100), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)


class GalleryImage(Base, TimestampMixin):
    __tablename__ = "gallery_images"

    id = Column(Integer, primary_key=True, index=True)
    image_url = Column(String(500), nullable=False)
    title = Column(String(255), nullable=True)
    category = Column(String(100), nullable=True)


class Testimonial(Base, TimestampMixin):
    __tablename__ = "testimonials"

    id = Column(Integer, primary_key=True, index=True)
    guest_name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    rating = Column(Integer, nullable=True)
    content = Column(Text, nullable=False)
    image = Column(String(500), nullable=True)


class NearbyLocation(Base, TimestampMixin):
    __tablename__ = "nearby_locations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    distance = Column(String(100), nullable=True)
    image = Column(String(500), nullable=True)
