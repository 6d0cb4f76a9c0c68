"""
Shared model base.

Python attributes are snake_case; the JSON wire shape is camelCase
(riskLevel, ruleCode, matchedCategory, ...). Both names are accepted on
input.
"""

from typing import Union

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


# Taxonomy documents may carry fractional severities and modifiers.
Severity = Union[int, float]


class WireModel(BaseModel):
    """Immutable record with camelCase wire aliases."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
