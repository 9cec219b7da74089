"""Pydantic models for ROR API v2 responses.

Only the fields read for classification are modelled, and each is optional
where the API may leave it out or null.
"""

from collections.abc import Sequence

from pydantic import BaseModel


class RorName(BaseModel):
    """A name entry of an organization record."""

    value: str | None = None
    types: Sequence[str] | None = ()


class RorOrganization(BaseModel):
    """A single organization record."""

    id: str
    names: Sequence[RorName] | None = ()


class RorSearchResponse(BaseModel):
    """Response from the organization search API."""

    number_of_results: int
