"""Shared base model for camelCase JSON documents."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model whose JSON keys are camelCase while attributes stay snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """Dump to a JSON-compatible dict using the wire (alias) keys."""
        return self.model_dump(by_alias=True, mode="json")
