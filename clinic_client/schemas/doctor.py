from typing import Optional
from clinic_client.schemas.base import DraftModel, WireModel


class DoctorBase(WireModel):
    user_id: str
    department_id: str
    license_number: str
    specialization: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    room_number: Optional[str] = None
    working_hours: Optional[str] = None
    biography: Optional[str] = None
    is_active: bool = True


class DoctorCreate(DoctorBase):
    class Config:
        extra = "forbid"


class DoctorUpdate(DraftModel):
    user_id: Optional[str] = None
    department_id: Optional[str] = None
    license_number: Optional[str] = None
    specialization: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    room_number: Optional[str] = None
    working_hours: Optional[str] = None
    biography: Optional[str] = None
    is_active: Optional[bool] = None


class Doctor(DoctorBase):
    id: str
