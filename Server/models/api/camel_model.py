"""
Magazine Portal Server - Camel Case Base Model

Shared Pydantic base for request and response bodies.
Fields are declared in snake_case and exchanged as camelCase on the wire;
snake_case keys are also accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
