from clinic_client.exceptions import ConflictFailure
from clinic_client.integrity import has_dependent_patients
from clinic_client.schemas.department import Department, DepartmentCreate, DepartmentUpdate
from clinic_client.stores.base import EntityStore
from clinic_client.stores.patient_store import PatientStore


class DepartmentStore(EntityStore[Department]):
    resource = "/departments"
    label = "department"
    model = Department
    create_model = DepartmentCreate
    update_model = DepartmentUpdate

    def __init__(self, api, patients: PatientStore):
        super().__init__(api)
        self.patients = patients

    def _check_can_remove(self, entity_id: str) -> None:
        if has_dependent_patients(entity_id, self.patients.items, kind="department"):
            raise ConflictFailure(
                "This department still has patients and cannot be deleted.",
                entity_id=entity_id,
            )

    def name_exists(self, name: str) -> bool:
        """Department names compare case-insensitively."""
        wanted = name.strip().casefold()
        return any(d.name.strip().casefold() == wanted for d in self.items)
