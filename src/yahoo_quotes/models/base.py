"""Shared base model and the embedded API error payload."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UpstreamModel(BaseModel):
    """Base for models bound to yahoo! finance camelCase JSON.

    Field names are snake_case; the wire aliases are generated. Unknown keys
    are ignored because upstream adds fields without notice.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ApiErrorMessage(UpstreamModel):
    """The ``{code, description}`` error object yahoo! embeds in responses."""

    code: str | None = None
    description: str | None = None
