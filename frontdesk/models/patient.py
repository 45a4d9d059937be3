# FILE: frontdesk/models/patient.py
from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    Date,
    DateTime,
    Numeric,
    Text,
    func,
    ForeignKey,
)
from sqlalchemy.orm import relationship

from frontdesk.db.base import Base


class Patient(Base):
    __tablename__ = "patients"
    __table_args__ = {
        "mysql_engine": "InnoDB",
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id = Column(Integer, primary_key=True, index=True)
    uhid = Column(String(32), unique=True, index=True, nullable=False)

    # core demographics
    name = Column(String(255), nullable=False)
    first_name = Column(String(120), nullable=True)
    last_name = Column(String(120), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    age = Column(Integer, nullable=True)
    gender = Column(String(16), nullable=True)
    marital_status = Column(String(32), nullable=True)
    phone = Column(String(20), index=True, nullable=True)
    email = Column(String(191), nullable=True)
    address = Column(String(500), nullable=True)

    # medical
    blood_group = Column(String(8), nullable=True)
    allergies = Column(Text, nullable=True)
    medical_history = Column(Text, nullable=True)
    current_medications = Column(Text, nullable=True)
    chronic_conditions = Column(Text, nullable=True)
    previous_surgeries = Column(Text, nullable=True)

    # admission
    admission_type = Column(String(20), nullable=False, default="outpatient")
    admission_date = Column(DateTime, nullable=True)
    admission_time = Column(String(8), nullable=True)
    primary_complaint = Column(Text, nullable=True)
    initial_symptoms = Column(Text, nullable=True)
    referring_doctor_facility = Column(String(255), nullable=True)
    referred_by = Column(String(255), nullable=True)
    consulting_doctor_id = Column(Integer, nullable=True)
    consulting_doctor_name = Column(String(120), nullable=True)
    department_ward = Column(String(120), nullable=True)
    room_number = Column(String(30), nullable=True)

    # guardian / attendant
    guardian_name = Column(String(120), nullable=True)
    guardian_relationship = Column(String(64), nullable=True)
    guardian_phone = Column(String(20), nullable=True)
    guardian_address = Column(String(500), nullable=True)

    # emergency contact
    emergency_contact_name = Column(String(120), nullable=True)
    emergency_contact_phone = Column(String(20), nullable=True)
    emergency_contact_relationship = Column(String(64), nullable=True)

    # insurance
    insurance_provider = Column(String(120), nullable=True)
    insurance_number = Column(String(64), nullable=True)

    # vitals scratch (captured at the desk, copied to the OPD vitals later)
    height = Column(Numeric(6, 2), nullable=True)
    weight = Column(Numeric(6, 2), nullable=True)
    bmi = Column(Numeric(5, 2), nullable=True)
    temperature = Column(Numeric(5, 2), nullable=True)
    bp_systolic = Column(Integer, nullable=True)
    bp_diastolic = Column(Integer, nullable=True)
    pulse = Column(Integer, nullable=True)
    spo2 = Column(Integer, nullable=True)
    respiratory_rate = Column(Integer, nullable=True)

    # billing scratch
    registration_fee = Column(Numeric(12, 2), nullable=True)
    consultation_fee = Column(Numeric(12, 2), nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=True)
    payment_mode = Column(String(32), nullable=True)

    # status
    is_admitted = Column(Boolean, default=False, nullable=False)
    status = Column(String(20), default="active")
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(
        DateTime,
        onupdate=func.now(),
        server_default=func.now(),
    )

    user = relationship("User", foreign_keys=[user_id])
