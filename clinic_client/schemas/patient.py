from datetime import date
from typing import Optional
from pydantic import model_validator
from clinic_client.schemas.base import DraftModel, WireModel

DOCTOR_KEYS = ("doctorId", "doctor_id")
PRIMARY_DOCTOR_KEYS = ("primaryDoctorId", "primary_doctor_id")


def _doctor_as_primary(data):
    # Responses call the assignment doctorId, request bodies primaryDoctorId
    if not isinstance(data, dict) or not any(k in data for k in DOCTOR_KEYS):
        return data
    data = dict(data)
    doctor_id = None
    for key in DOCTOR_KEYS:
        if key in data:
            doctor_id = data.pop(key)
    if not any(k in data for k in PRIMARY_DOCTOR_KEYS):
        data["primaryDoctorId"] = doctor_id
    return data


class PatientBase(WireModel):
    first_name: str
    last_name: str
    national_id: str
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    blood_type: Optional[str] = None
    allergies: Optional[str] = None
    chronic_conditions: Optional[str] = None
    diagnosis: Optional[str] = None
    insurance_provider: Optional[str] = None
    insurance_number: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    department_id: Optional[str] = None


class PatientCreate(PatientBase):
    primary_doctor_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_doctor_id(cls, data):
        return _doctor_as_primary(data)

    class Config:
        extra = "forbid"


class PatientUpdate(DraftModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    national_id: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    blood_type: Optional[str] = None
    allergies: Optional[str] = None
    chronic_conditions: Optional[str] = None
    diagnosis: Optional[str] = None
    insurance_provider: Optional[str] = None
    insurance_number: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    primary_doctor_id: Optional[str] = None
    department_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_doctor_id(cls, data):
        return _doctor_as_primary(data)


class Patient(PatientBase):
    id: str
    doctor_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_primary_doctor(cls, data):
        if isinstance(data, dict) and not data.get("doctorId") and not data.get("doctor_id"):
            primary = data.get("primaryDoctorId") or data.get("primary_doctor_id")
            if primary:
                data = {**data, "doctorId": primary}
        return data

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
