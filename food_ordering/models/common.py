"""
Shared pydantic building blocks for API schemas
"""
from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base for request/response bodies: camelCase on the wire, ORM friendly"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


def IdField():
    """Entity id, read from ``id`` and written as ``_id``"""
    return Field(validation_alias=AliasChoices("id", "_id"), serialization_alias="_id")


def RefField(column: str, name: str, default=...):
    """Reference serialised as a bare id under ``name``, read from ``column``"""
    return Field(
        default,
        validation_alias=AliasChoices(column, name),
        serialization_alias=name,
    )


class ImageRef(BaseModel):
    """Image stored on the remote host"""

    model_config = ConfigDict(from_attributes=True)

    public_id: str
    url: str


class NamedRef(APIModel):
    id: str = IdField()
    name: str


class UserSummary(NamedRef):
    email: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
