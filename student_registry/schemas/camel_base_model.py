from enum import Enum
from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel


class CamelCaseBaseModel(BaseModel):
    """
    Base model with camelCase field aliases.

    Student keys travel as camelCase on the wire and in every export format
    (``enrollmentDate``), while Python code uses snake_case attributes
    (``enrollment_date``):

    - Input: camelCase keys are accepted, and so are the snake_case names.
    - Output: call `model_dump(by_alias=True)` to get the camelCase keys back.
    - Enums are dumped as their plain values.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_serializer("*")
    def serialize_any(self, value):
        if isinstance(value, Enum):
            return value.value

        if isinstance(value, (list, tuple)):
            return [self.serialize_any(item) for item in value]

        if isinstance(value, dict):
            return {key: self.serialize_any(val) for key, val in value.items()}

        return value
