"""
Snippetbox — HTML Form Schemas
================================

What:  Pydantic models validating the snippet, signup and login forms.
Why:   Strict input validation with field-level messages that the templates
       render next to each input.
How:   Each field validator runs in "before" mode so blank and missing values
       are reported with our own messages instead of Pydantic's type errors.
       validate_form() turns a ValidationError into a {field: message} map.
Who:   Used by the snippet and user route handlers.
"""

import re
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic_core import PydanticCustomError

# What: Allowed snippet lifetimes in days (one day, one week, one year)
PERMITTED_EXPIRES = (1, 7, 365)

TITLE_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8
# bcrypt ignores everything past 72 bytes; reject rather than truncate silently
PASSWORD_MAX_BYTES = 72

# Pattern recommended by the WHATWG for <input type="email">
EMAIL_RX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9]"
    r"(?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

# Key for errors that don't belong to a single field (e.g. bad credentials)
NON_FIELD = "__all__"

FormT = TypeVar("FormT", bound=BaseModel)


def _not_blank(value: Any) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise PydanticCustomError("blank", "This field cannot be blank")
    return text


class SnippetForm(BaseModel):
    """Form posted to /snippet/create."""

    # Missing fields still go through the validators below
    model_config = ConfigDict(validate_default=True)

    title: str = ""
    content: str = ""
    expires: int = 0

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> str:
        title = _not_blank(v)
        if len(title) > TITLE_MAX_LENGTH:
            raise PydanticCustomError(
                "too_long",
                "This field cannot be more than {max} characters long",
                {"max": TITLE_MAX_LENGTH},
            )
        return title

    @field_validator("content", mode="before")
    @classmethod
    def validate_content(cls, v: Any) -> str:
        return _not_blank(v)

    @field_validator("expires", mode="before")
    @classmethod
    def validate_expires(cls, v: Any) -> int:
        try:
            days = int(v)
        except (TypeError, ValueError):
            days = None
        if days not in PERMITTED_EXPIRES:
            raise PydanticCustomError("not_permitted", "This field must equal 1, 7 or 365")
        return days


class SignupForm(BaseModel):
    """Form posted to /user/signup."""

    model_config = ConfigDict(validate_default=True)

    name: str = ""
    email: str = ""
    password: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return _not_blank(v)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any) -> str:
        email = _not_blank(v)
        if not EMAIL_RX.match(email):
            raise PydanticCustomError("email", "This field must be a valid email address")
        return email

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> str:
        _not_blank(v)
        password = str(v)
        if len(password) < PASSWORD_MIN_LENGTH:
            raise PydanticCustomError(
                "too_short",
                "This field must be at least {min} characters long",
                {"min": PASSWORD_MIN_LENGTH},
            )
        if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise PydanticCustomError(
                "too_long",
                "This field cannot be more than {max} bytes long",
                {"max": PASSWORD_MAX_BYTES},
            )
        return password


class LoginForm(BaseModel):
    """Form posted to /user/login."""

    model_config = ConfigDict(validate_default=True)

    email: str = ""
    password: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any) -> str:
        email = _not_blank(v)
        if not EMAIL_RX.match(email):
            raise PydanticCustomError("email", "This field must be a valid email address")
        return email

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> str:
        _not_blank(v)
        return str(v)


def form_errors(exc: ValidationError) -> Dict[str, str]:
    """Map a ValidationError to {field: first message for that field}."""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else NON_FIELD
        errors.setdefault(field, error["msg"])
    return errors


def validate_form(
    form_cls: Type[FormT], data: Mapping[str, Any]
) -> Tuple[Optional[FormT], Dict[str, str]]:
    """
    Validate submitted form data.

    Returns:
        (form, {}) when valid, (None, errors) otherwise
    """
    try:
        return form_cls.model_validate(dict(data)), {}
    except ValidationError as exc:
        return None, form_errors(exc)
