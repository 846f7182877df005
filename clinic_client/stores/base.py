"""
Generic store for one entity collection mirrored from a REST resource.

Every public operation sets `loading` for its duration, writes a readable
message to `error` when it fails, and re-raises so callers can branch on
the outcome. The local collection only changes after the backend accepts a
mutation. Overlapping calls are not serialized: the last response wins.
"""

from contextlib import asynccontextmanager
from typing import Any, Generic, Optional, TypeVar
from pydantic import ValidationError
from clinic_client.exceptions import ClinicClientError, ValidationFailure
from clinic_client.schemas.base import WireModel, as_dict
from clinic_client.services.api_client import ApiClient
from clinic_client.utils.logger import get_logger

logger = get_logger("stores")

EntityT = TypeVar("EntityT", bound=WireModel)


class EntityStore(Generic[EntityT]):
    resource: str = ""
    label: str = "entity"
    model: type[WireModel]
    create_model: type[WireModel]
    update_model: type[WireModel]

    def __init__(self, api: ApiClient):
        self.api = api
        self.items: list[EntityT] = []
        self.loading = False
        self.error = ""

    @asynccontextmanager
    async def _operation(self, failure_message: str):
        self.loading = True
        self.error = ""
        try:
            yield
        except ClinicClientError as e:
            self.error = e.message or failure_message
            raise
        finally:
            self.loading = False

    def _draft(self, data) -> dict:
        try:
            return as_dict(data)
        except (TypeError, ValueError) as e:
            raise ValidationFailure(f"Invalid {self.label} data") from e

    def _validate(self, schema: type[WireModel], data) -> WireModel:
        if isinstance(data, schema):
            return data
        try:
            return schema.model_validate(self._draft(data))
        except ValidationError as e:
            raise ValidationFailure(f"Invalid {self.label} data", details={"errors": e.errors()}) from e

    def _parse(self, body: Any) -> EntityT:
        try:
            return self.model.model_validate(body)
        except ValidationError as e:
            raise ValidationFailure(f"Unexpected {self.label} representation from server") from e

    def _parse_list(self, body: Any) -> list[EntityT]:
        if not isinstance(body, list):
            raise ValidationFailure(f"Expected a list of {self.label} records from server")
        seen = {}
        for raw in body:
            entity = self._parse(raw)
            seen.setdefault(entity.id, entity)
        return list(seen.values())

    def _index_of(self, entity_id: str) -> int:
        for index, item in enumerate(self.items):
            if item.id == entity_id:
                return index
        return -1

    def _upsert(self, entity: EntityT) -> None:
        index = self._index_of(entity.id)
        if index == -1:
            self.items.append(entity)
        else:
            self.items[index] = entity

    def _check_can_remove(self, entity_id: str) -> None:
        """Hook for stores whose entities may be referenced elsewhere."""

    def _path(self, entity_id: str) -> str:
        return f"{self.resource}/{entity_id}"

    async def fetch_all(self) -> list[EntityT]:
        async with self._operation(f"Failed to load {self.label} list"):
            body = await self.api.get(self.resource)
            self.items = self._parse_list(body)
        logger.debug("Loaded %d %s records", len(self.items), self.label)
        return self.items

    async def fetch_by_id(self, entity_id: str) -> EntityT:
        async with self._operation(f"Failed to load {self.label}"):
            entity = self._parse(await self.api.get(self._path(entity_id)))
            self._upsert(entity)
        return entity

    async def create(self, draft) -> EntityT:
        async with self._operation(f"Failed to create {self.label}"):
            payload = self._validate(self.create_model, draft).to_wire()
            entity = self._parse(await self.api.post(self.resource, json=payload))
            # A fetch that raced ahead may already hold it
            self._upsert(entity)
        logger.info("Created %s %s", self.label, entity.id)
        return entity

    async def update(self, entity_id: str, changes) -> EntityT:
        async with self._operation(f"Failed to update {self.label}"):
            changes = self._draft(changes)
            changes.pop("id", None)
            payload = self._validate(self.update_model, changes).to_wire()
            entity = self._parse(await self.api.put(self._path(entity_id), json=payload))
            if entity.id != entity_id:
                logger.warning("Server renamed %s %s to %s; keeping original id", self.label, entity_id, entity.id)
                entity = entity.model_copy(update={"id": entity_id})
            index = self._index_of(entity_id)
            if index == -1:
                self.items.append(entity)
            else:
                self.items[index] = entity
        return entity

    async def remove(self, entity_id: str) -> None:
        async with self._operation(f"Failed to delete {self.label}"):
            self._check_can_remove(entity_id)
            await self.api.delete(self._path(entity_id))
            self.items = [item for item in self.items if item.id != entity_id]
        logger.info("Deleted %s %s", self.label, entity_id)

    def get_by_id(self, entity_id: str) -> Optional[EntityT]:
        index = self._index_of(entity_id)
        return self.items[index] if index != -1 else None
