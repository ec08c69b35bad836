"""Pydantic schemas for people and relationships crossing the API boundary."""

from pydantic import BaseModel, ConfigDict, Field


class PersonCreate(BaseModel):
    """Request body for a new person."""

    name: str = Field(min_length=1, description="Display name")


class PersonUpdate(BaseModel):
    """Request body for renaming a person."""

    name: str = Field(min_length=1, description="New display name")


class PersonOut(BaseModel):
    """A person as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    created_at: str | None = None
    updated_at: str | None = None


class RelationshipCreate(BaseModel):
    """Request body for a new parent -> child edge."""

    parent_id: str = Field(min_length=1, description="Id of the parent")
    child_id: str = Field(min_length=1, description="Id of the child")


class RelationshipOut(BaseModel):
    """An edge as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    parent_id: str
    child_id: str
    created_at: str | None = None
    updated_at: str | None = None


class RelatednessReport(BaseModel):
    """Outcome of a dry-run relatedness check."""

    parent_id: str
    child_id: str
    related: bool
    direct_edges: list[str] = Field(
        default_factory=list, description="Ids of existing edges between the pair"
    )
    shared_ancestors: list[str] = Field(
        default_factory=list, description="Ids of ancestors both people share"
    )
