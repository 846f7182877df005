from typing import Optional
from clinic_client.schemas.base import DraftModel, WireModel


class DepartmentBase(WireModel):
    name: str
    description: Optional[str] = None
    is_active: bool = True


class DepartmentCreate(DepartmentBase):
    class Config:
        extra = "forbid"


class DepartmentUpdate(DraftModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class Department(DepartmentBase):
    id: str
