from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Timestamp keys keep their snake_case spelling on the wire.
_SNAKE_CASE_KEYS = frozenset({"created_at", "updated_at"})


def wire_alias(field_name: str) -> str:
    """Return the platform key for a Python field name."""
    if field_name in _SNAKE_CASE_KEYS:
        return field_name
    return to_camel(field_name)


class WireModel(BaseModel):
    """
    Base for every model that crosses the platform boundary.

    Python code uses snake_case attributes; records and request bodies use the
    platform's camelCase keys.
    """

    model_config = ConfigDict(
        alias_generator=wire_alias,
        populate_by_name=True,
    )

    def to_record(self, **kwargs: Any) -> dict:
        """Serialise to a JSON-safe dict keyed by platform names."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)
