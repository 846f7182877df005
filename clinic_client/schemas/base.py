from pydantic import BaseModel
from pydantic.alias_generators import to_camel


def as_dict(data) -> dict:
    """Plain dict from a draft given either as a mapping or as a model."""
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return dict(data)


class WireModel(BaseModel):
    """Snake_case attributes, camelCase on the wire. Either spelling is accepted on input."""

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        coerce_numbers_to_str = True


class DraftModel(WireModel):
    """Request bodies built from user input. Unknown keys are an error, not silently dropped."""

    class Config:
        extra = "forbid"
