"""Base model carrying the host's JSON naming conventions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bodyfilter.shapes import construct_bare


class BindableModel(BaseModel):
    """Base class for request and response bodies.

    JSON keys are camelCase; Python field names are also accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def bare(cls):
        """Allocate an instance for selective binding, skipping validation.

        Override to supply values a subclass needs before any member is
        bound.
        """
        return construct_bare(cls)


class RootResource(BindableModel):
    api_version: str
    links: dict[str, str] = Field(default_factory=dict)
