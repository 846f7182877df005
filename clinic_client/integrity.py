from typing import Iterable, Optional
from clinic_client.schemas.patient import Patient

REFERENCE_FIELDS = {
    "doctor": ("doctor_id",),
    "department": ("department_id",),
    None: ("doctor_id", "department_id"),
}


def has_dependent_patients(target_id: str, patients: Iterable[Patient], kind: Optional[str] = None) -> bool:
    """True if any patient's doctor or department reference (or both, when kind is None) equals target_id."""
    try:
        fields = REFERENCE_FIELDS[kind]
    except KeyError:
        raise ValueError(f"Unknown reference kind: {kind!r}") from None
    return any(
        getattr(patient, field) == target_id
        for patient in patients
        for field in fields
    )
