from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Provenance of a record: fetched from an upstream, or computed locally by
# cosmofy.synthesis because no upstream value was available.
Source = Literal["live", "synthesized"]


class ApiModel(BaseModel):
    """Base for records returned to the front end (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
