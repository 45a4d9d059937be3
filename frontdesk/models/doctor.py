# FILE: frontdesk/models/doctor.py
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey

from frontdesk.db.base import Base


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    name = Column(String(120), nullable=False)
    specialization = Column(String(255), nullable=True)
    consultation_fee = Column(Numeric(10, 2), nullable=True)

    status = Column(String(20), default="active", index=True)  # active / inactive
