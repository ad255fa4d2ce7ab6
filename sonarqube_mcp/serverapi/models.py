"""Base class and shared records for SonarQube JSON payloads.

Every field is optional: SonarQube Server and SonarQube Cloud omit
different fields, and a missing one must never fail the whole parse.
"""

import math

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Immutable record parsed from camelCase JSON. Unknown fields are ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class Paging(ApiModel):
    page_index: int | None = None
    page_size: int | None = None
    total: int | None = None

    @property
    def total_pages(self) -> int | None:
        """ceil(total / page_size), or None when page size is zero or unknown."""
        if not self.page_size or self.total is None:
            return None
        return math.ceil(self.total / self.page_size)


class Impact(ApiModel):
    software_quality: str | None = None
    severity: str | None = None
