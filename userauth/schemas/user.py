# userauth/schemas/user.py

"""
Input validation for the user forms.

Failures are reported as (field, message) pairs keyed by the camelCase
names the GraphQL API and the frontend forms use.
"""

from typing import Annotated, Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from userauth.core.configuration import settings

_http_url = TypeAdapter(HttpUrl)


class FieldErrorOut(BaseModel):
    field: str
    message: str


def check_username(value: str) -> str:
    if len(value) <= 2:
        raise PydanticCustomError("username_too_short", "Length must be greater than 2")
    if "@" in value:
        raise PydanticCustomError("username_has_at", "Cannot include an @")
    return value


def check_email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise PydanticCustomError("invalid_email", "Invalid email")
    return value


def check_password(value: str) -> str:
    if len(value) < settings.PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            "password_too_short",
            "Length must be at least {min_length}",
            {"min_length": settings.PASSWORD_MIN_LENGTH},
        )
    return value


def check_confirmation(value: str | None, password: str | None) -> str | None:
    if value != password:
        raise PydanticCustomError("password_mismatch", "Passwords do not match")
    return value


class InputModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterIn(InputModel):
    username: str
    email: str
    password: str
    confirm_password: str

    @field_validator("username")
    @classmethod
    def _username(cls, v: str) -> str:
        return check_username(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return check_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return check_password(v)

    @field_validator("confirm_password")
    @classmethod
    def _confirm_password(cls, v: str, info: ValidationInfo) -> str:
        # password missing from info.data means it already failed
        if "password" not in info.data:
            return v
        return check_confirmation(v, info.data["password"])


class ChangeInfoIn(InputModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None
    confirm_password: Annotated[str | None, Field(default=None, validate_default=True)]

    @field_validator("username")
    @classmethod
    def _username(cls, v: str | None) -> str | None:
        return v if v is None else check_username(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str | None) -> str | None:
        return v if v is None else check_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str | None) -> str | None:
        return v if v is None else check_password(v)

    @field_validator("confirm_password")
    @classmethod
    def _confirm_password(cls, v: str | None, info: ValidationInfo) -> str | None:
        password = info.data.get("password")
        if password is None:
            return v
        return check_confirmation(v, password)


class ChangePasswordIn(InputModel):
    new_password: str
    confirm_new_password: str

    @field_validator("new_password")
    @classmethod
    def _new_password(cls, v: str) -> str:
        return check_password(v)

    @field_validator("confirm_new_password")
    @classmethod
    def _confirm_new_password(cls, v: str, info: ValidationInfo) -> str:
        if "new_password" not in info.data:
            return v
        return check_confirmation(v, info.data["new_password"])


class ImageUrlIn(InputModel):
    image_url: str

    @field_validator("image_url")
    @classmethod
    def _image_url(cls, v: str) -> str:
        try:
            _http_url.validate_python(v)
        except ValidationError:
            raise PydanticCustomError("invalid_url", "Invalid URL")
        return v


def to_field_errors(model: type[InputModel], exc: ValidationError) -> list[FieldErrorOut]:
    errors = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "input"
        # Defaults are validated under the python name, not the alias
        if field in model.model_fields:
            field = model.model_fields[field].alias or field
        errors.append(FieldErrorOut(field=field, message=error["msg"]))
    return errors


def validate_input(model: type[InputModel], data: dict[str, Any]) -> list[FieldErrorOut] | None:
    """
    Validates camelCase form data against `model`.
    Returns the field errors, or None when the data is valid.
    """
    try:
        model.model_validate(data)
    except ValidationError as e:
        return to_field_errors(model, e)
    return None
