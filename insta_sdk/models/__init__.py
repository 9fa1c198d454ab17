"""Public base model for decoded API responses.

The API answers with snake_case JSON keys. `ResponseModel` subclasses declare
snake_case fields, which are matched first; the camelCase spelling of each key
is accepted as a fallback. A payload such as `{"user_id": 42}` or
`{"userId": 42}` decodes into `user_id == 42`, and validation errors name the
snake_case key. Unknown keys are ignored.

Example:
    from insta_sdk.models import ResponseModel

    class Friendship(ResponseModel):
        following: bool
        followed_by: bool
        is_private: bool = False
"""

from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def _snake_then_camel(name: str) -> AliasChoices:
    return AliasChoices(name, to_camel(name))


class ResponseModel(BaseModel):
    """Base class for typed API responses."""

    model_config = ConfigDict(
        alias_generator=AliasGenerator(
            validation_alias=_snake_then_camel,
            serialization_alias=to_camel,
        ),
        extra="ignore",
    )


__all__ = ["ResponseModel"]
