"""
Shared Pydantic base types.

CamelModel: snake_case attributes in Python, camelCase keys on the wire.
FastAPI serializes response models by alias, so every response built from
these schemas is camelCase; requests accept either spelling.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class PageMeta(CamelModel):
    """Pagination fields shared by every list response."""
    total: int
    page: int
    page_size: int
