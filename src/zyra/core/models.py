"""Base model for records shared with the UI and the JSON files."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Pydantic model whose wire format uses camelCase keys.

    Attributes stay snake_case in Python; ``to_wire()`` produces the dict
    written to disk and returned by the API. Both spellings are accepted on
    input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
