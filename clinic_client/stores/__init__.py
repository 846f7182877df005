from clinic_client.stores.base import EntityStore
from clinic_client.stores.patient_store import PatientStore
from clinic_client.stores.doctor_store import DoctorStore
from clinic_client.stores.department_store import DepartmentStore

__all__ = ["EntityStore", "PatientStore", "DoctorStore", "DepartmentStore"]
