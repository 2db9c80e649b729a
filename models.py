# models.py
# Role: SQLAlchemy ORM models for the study cards domain.
#       Defines the StudyCard model, the single table behind both the
#       card pages and the finance reporting API.

from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Float, Integer, String, Text
from db import Base


class StudyCard(Base):
    """
    ORM model representing one study card (an investment / learning item).

    Cards are created and edited from the dashboard. The reporting API reads
    the same rows: estimated_cost is the committed amount, is_completed marks
    the amount as realized, and created_at places the card in a period.
    """

    __tablename__ = "study_cards"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(256), nullable=False)

    # May contain HTML from the rich-text editor; rendered as-is on detail page
    description = Column(Text, nullable=False, default="")

    # Free-text grouping label (None = uncategorized)
    category = Column(String(128), nullable=True, index=True)

    # "easy" / "medium" / "hard"; pages show "medium" when empty
    difficulty = Column(String(16), nullable=True)

    # Comma-separated tags
    tags = Column(String(512), nullable=True)

    notes = Column(Text, nullable=True)

    youtube_url = Column(String(512), nullable=True)
    reference_url = Column(String(1024), nullable=True)

    # Legacy single cover image (newer cards keep images in attachments)
    image_url = Column(String(1024), nullable=True)
    image_s3_key = Column(String(512), nullable=True)

    # Committed amount; None counts as 0 in every aggregate
    estimated_cost = Column(Float, nullable=True)

    invest_date = Column(Date, nullable=True)

    # 0..5 stars
    rating = Column(Integer, nullable=True)

    # Realized / settled
    is_completed = Column(Boolean, nullable=False, default=False)

    # JSON list of attachment dicts (see app/services/attachments.py)
    attachments = Column(Text, nullable=True)

    # Local time; decides which reporting period the card belongs to
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
    updated_at = Column(DateTime, nullable=True, default=datetime.now, onupdate=datetime.now)
