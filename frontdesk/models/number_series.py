# FILE: frontdesk/models/number_series.py
from sqlalchemy import Column, Integer, String, UniqueConstraint

from frontdesk.db.base import Base


class NumberSeries(Base):
    """
    One counter row per (key, period_key), e.g. ("UHID", "2510") or
    ("OPQ", "20251014"). next_seq is the number the next caller receives.
    """
    __tablename__ = "number_series"
    __table_args__ = (
        UniqueConstraint("key", "period_key", name="uq_number_series_key_period"),
        {
            "mysql_engine": "InnoDB",
            "mysql_charset": "utf8mb4",
            "mysql_collate": "utf8mb4_unicode_ci",
        },
    )

    id = Column(Integer, primary_key=True)
    key = Column(String(32), nullable=False)
    period_key = Column(String(16), nullable=False)
    next_seq = Column(Integer, nullable=False, default=1)
