from clinic_client.exceptions import ConflictFailure
from clinic_client.integrity import has_dependent_patients
from clinic_client.schemas.doctor import Doctor, DoctorCreate, DoctorUpdate
from clinic_client.stores.base import EntityStore
from clinic_client.stores.patient_store import PatientStore


class DoctorStore(EntityStore[Doctor]):
    resource = "/doctors"
    label = "doctor"
    model = Doctor
    create_model = DoctorCreate
    update_model = DoctorUpdate

    def __init__(self, api, patients: PatientStore):
        super().__init__(api)
        self.patients = patients

    def _check_can_remove(self, entity_id: str) -> None:
        if has_dependent_patients(entity_id, self.patients.items, kind="doctor"):
            raise ConflictFailure(
                "This doctor still has assigned patients and cannot be deleted.",
                entity_id=entity_id,
            )

    def license_exists(self, license_number: str) -> bool:
        license_number = license_number.strip()
        return any(d.license_number == license_number for d in self.items)

    def doctors_in_department(self, department_id: str) -> list[Doctor]:
        return [d for d in self.items if d.department_id == department_id]
