from clinic_client.schemas.auth import Role, Session, LoginRequest, RegisterRequest, RegisterResponse, TokenResponse, UserInfo
from clinic_client.schemas.patient import Patient, PatientCreate, PatientUpdate
from clinic_client.schemas.doctor import Doctor, DoctorCreate, DoctorUpdate
from clinic_client.schemas.department import Department, DepartmentCreate, DepartmentUpdate

__all__ = [
    "Role", "Session", "LoginRequest", "RegisterRequest", "RegisterResponse", "TokenResponse", "UserInfo",
    "Patient", "PatientCreate", "PatientUpdate",
    "Doctor", "DoctorCreate", "DoctorUpdate",
    "Department", "DepartmentCreate", "DepartmentUpdate",
]
