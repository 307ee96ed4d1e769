from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from shortlinks.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Link(Base):
    __tablename__ = "links"

    id = Column(Integer, primary_key=True)
    code = Column(String(8), unique=True, index=True, nullable=False)
    target_url = Column(Text, nullable=False)
    total_clicks = Column(Integer, nullable=False, default=0, server_default="0")
    last_clicked = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
