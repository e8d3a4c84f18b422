"""Association tables linking investments to user-scoped labels."""

from sqlalchemy import Column, ForeignKey, Integer, Table

from folio.database import Base

investment_categories = Table(
    "investment_categories",
    Base.metadata,
    Column(
        "investment_id",
        Integer,
        ForeignKey("investments.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

investment_tags = Table(
    "investment_tags",
    Base.metadata,
    Column(
        "investment_id",
        Integer,
        ForeignKey("investments.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)
