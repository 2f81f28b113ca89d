"""Request and response models for the user API."""

from typing import List

from pydantic import BaseModel, Field


class UserCredentials(BaseModel):
    """Username/password pair used by login and register."""

    username: str = Field(min_length=1, description="Unique username")
    password: str = Field(min_length=1, description="Account password")


class UserView(BaseModel):
    """Public projection of a stored user."""

    username: str


class MessageResponse(BaseModel):
    """Single-message response body."""

    message: str = Field(examples=["user123 login successfully"])


class UserListResponse(BaseModel):
    data: List[UserView]
