# userauth/graphql/types.py

import datetime as dt
from typing import Iterable

import strawberry
from strawberry.types import Info

from userauth.models.user import User
from userauth.schemas.user import FieldErrorOut


@strawberry.type(name="User")
class UserType:
    id: int
    username: str
    image_url: str | None
    created_at: dt.datetime
    updated_at: dt.datetime
    owner_email: strawberry.Private[str]

    @strawberry.field
    def email(self, info: Info) -> str:
        # Only the owner gets to see their own email
        if info.context.user_id == self.id:
            return self.owner_email
        return ""

    @classmethod
    def from_model(cls, user: User) -> "UserType":
        return cls(
            id=user.id,
            username=user.username,
            image_url=user.image_url,
            created_at=user.created_at,
            updated_at=user.updated_at,
            owner_email=user.email,
        )


@strawberry.type
class FieldError:
    field: str
    message: str


@strawberry.type
class UserResponse:
    errors: list[FieldError] | None = None
    user: UserType | None = None

    @classmethod
    def error(cls, field: str, message: str) -> "UserResponse":
        return cls(errors=[FieldError(field=field, message=message)])

    @classmethod
    def from_errors(cls, errors: Iterable[FieldErrorOut]) -> "UserResponse":
        return cls(errors=[FieldError(field=e.field, message=e.message) for e in errors])

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(user=UserType.from_model(user))


@strawberry.input
class RegisterInput:
    username: str
    email: str
    password: str
    confirm_password: str


@strawberry.input
class UsernamePasswordInput:
    username_or_email: str
    password: str


@strawberry.input
class ChangeInfoInput:
    username: str | None = None
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = None
