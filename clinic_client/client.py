"""
One object wiring the gateway, session manager and the three stores together.

    client = create_client(navigate=router.push)
    await client.session.restore_session()
    await client.patients.fetch_all()
"""

from typing import Optional
from clinic_client.auth import Navigate, SessionManager
from clinic_client.config import Settings, get_settings
from clinic_client.services.api_client import ApiClient
from clinic_client.services.storage import CredentialStore, KeyValueCache, SessionRepository, build_cache
from clinic_client.stores import DepartmentStore, DoctorStore, PatientStore


class ClinicClient:
    def __init__(self, api: ApiClient, sessions: SessionRepository, navigate: Optional[Navigate] = None):
        self.api = api
        self.session = SessionManager(api, sessions, navigate=navigate)
        self.patients = PatientStore(api)
        self.doctors = DoctorStore(api, self.patients)
        self.departments = DepartmentStore(api, self.patients)
        api.on_unauthorized(self._forget_data)
        self.session.on_logout(self._forget_data)

    def _forget_data(self) -> None:
        # The next user must not see the previous user's records
        for store in (self.patients, self.doctors, self.departments):
            store.items = []

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> "ClinicClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_client(
    settings: Optional[Settings] = None,
    cache: Optional[KeyValueCache] = None,
    navigate: Optional[Navigate] = None,
    transport=None,
) -> ClinicClient:
    settings = settings or get_settings()
    cache = cache or build_cache(settings.cache_path)
    api = ApiClient(
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
        credentials=CredentialStore(cache),
        transport=transport,
    )
    return ClinicClient(api, SessionRepository(cache), navigate=navigate)
