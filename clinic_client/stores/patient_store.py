from clinic_client.schemas.patient import Patient, PatientCreate, PatientUpdate
from clinic_client.stores.base import EntityStore


class PatientStore(EntityStore[Patient]):
    resource = "/patients"
    label = "patient"
    model = Patient
    create_model = PatientCreate
    update_model = PatientUpdate

    def patient_exists(self, national_id: str) -> bool:
        """National ids are unique across all patients."""
        national_id = national_id.strip()
        return any(p.national_id == national_id for p in self.items)

    def patients_of_doctor(self, doctor_id: str) -> list[Patient]:
        return [p for p in self.items if p.doctor_id == doctor_id]

    def patients_in_department(self, department_id: str) -> list[Patient]:
        return [p for p in self.items if p.department_id == department_id]
