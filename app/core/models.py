from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    String,
    TIMESTAMP,
    Text,
    Date,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.core.database import Base


def _created_at():
    return Column(TIMESTAMP, nullable=False, server_default=func.now())


def _updated_at():
    return Column(
        TIMESTAMP, nullable=False, server_default=func.now(), onupdate=func.now()
    )


# =========================
# Organization
# =========================
class Organization(Base):
    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    address = Column(Text)
    phone = Column(String(20))

    created_at = _created_at()
    updated_at = _updated_at()

    facilities = relationship("Facility", back_populates="organization")


# =========================
# Facility (clinic site of an organization)
# =========================
class Facility(Base):
    __tablename__ = "facilities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    organization_id = Column(
        Integer, ForeignKey("organizations.id"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    address = Column(Text)
    phone = Column(String(20))

    created_at = _created_at()
    updated_at = _updated_at()

    organization = relationship("Organization", back_populates="facilities")
    doctors = relationship("Doctor", back_populates="facility")
    patients = relationship("Patient", back_populates="facility")


# =========================
# Doctor
# =========================
class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    facility_id = Column(
        Integer, ForeignKey("facilities.id"), nullable=False, index=True
    )
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(20))
    specialty = Column(String(100))

    created_at = _created_at()
    updated_at = _updated_at()

    facility = relationship("Facility", back_populates="doctors")
    visits = relationship("Visit", back_populates="doctor")


# =========================
# Patient
# =========================
class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    facility_id = Column(
        Integer, ForeignKey("facilities.id"), nullable=False, index=True
    )
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True)
    phone = Column(String(20))
    date_of_birth = Column(Date)
    address = Column(Text)

    created_at = _created_at()
    updated_at = _updated_at()

    facility = relationship("Facility", back_populates="patients")
    insurances = relationship("Insurance", back_populates="patient")
    visits = relationship("Visit", back_populates="patient")


# =========================
# Insurance policy of a patient
# =========================
class Insurance(Base):
    __tablename__ = "insurances"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    provider_name = Column(String(255), nullable=False)
    policy_number = Column(String(100), nullable=False)
    group_number = Column(String(100))
    effective_date = Column(Date)
    expiration_date = Column(Date)

    created_at = _created_at()
    updated_at = _updated_at()

    patient = relationship("Patient", back_populates="insurances")


# =========================
# Visit
# =========================
class Visit(Base):
    __tablename__ = "visits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    visit_date = Column(TIMESTAMP, nullable=False)
    reason = Column(Text)
    diagnosis = Column(Text)
    notes = Column(Text)

    created_at = _created_at()
    updated_at = _updated_at()

    doctor = relationship("Doctor", back_populates="visits")
    patient = relationship("Patient", back_populates="visits")


# =========================
# Report (saved question)
# =========================
class Report(Base):
    """
    A saved natural-language question the UI can re-run and chart.
    Only the question is stored; results are always computed fresh.
    """

    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    question = Column(Text, nullable=False)
    chart_type = Column(String(50))

    created_at = _created_at()
    updated_at = _updated_at()
