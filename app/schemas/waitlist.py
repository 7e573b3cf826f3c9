from dataclasses import dataclass
from typing import Any, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from app.core.exceptions import ValidationError
from app.models.waitlist_entry import CUSTOM_ROLE_MAX_LENGTH, EMAIL_MAX_LENGTH, RoleEnum

CUSTOM_ROLE_MIN_LENGTH = 2

INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
EMAIL_TOO_LONG_MESSAGE = f"Email must be at most {EMAIL_MAX_LENGTH} characters"
INVALID_ROLE_MESSAGE = "Please select a valid role"
CUSTOM_ROLE_TOO_LONG_MESSAGE = f"Role must be at most {CUSTOM_ROLE_MAX_LENGTH} characters"
CUSTOM_ROLE_INVALID_MESSAGE = "Please enter your role as text"
CUSTOM_ROLE_REQUIRED_MESSAGE = "Please specify your role (minimum 2 characters)"
INVALID_BODY_MESSAGE = "Request body must be a JSON object"

# Messages for fields that are missing from the payload altogether
_MISSING_MESSAGES = {
    "email": INVALID_EMAIL_MESSAGE,
    "role": INVALID_ROLE_MESSAGE,
}

ROLE_LABELS = {
    RoleEnum.STUDENT: "Student",
    RoleEnum.DEVELOPER: "Developer",
    RoleEnum.FOUNDER: "Founder",
    RoleEnum.DESIGNER: "Designer",
    RoleEnum.OTHER: "Other",
}


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str


class WaitlistSubmission(BaseModel):
    """Validated, normalized signup.

    Field checks run in declaration order (email, role, customRole). The
    role/customRole rule only runs once email and role are both valid.
    """
    model_config = ConfigDict(populate_by_name=True)

    email: str
    role: RoleEnum
    custom_role: Optional[str] = Field(default=None, alias="customRole", validate_default=True)

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise PydanticCustomError("email_invalid", INVALID_EMAIL_MESSAGE)
        candidate = v.strip()
        try:
            validate_email(candidate, check_deliverability=False)
        except EmailNotValidError as e:
            # Only the overall length check may fail here; our own limit is applied below
            if not _is_total_length_error(e):
                raise PydanticCustomError("email_invalid", INVALID_EMAIL_MESSAGE)
        if len(candidate) > EMAIL_MAX_LENGTH:
            raise PydanticCustomError("email_too_long", EMAIL_TOO_LONG_MESSAGE)
        return candidate.lower()

    @field_validator("role", mode="before")
    @classmethod
    def _check_role(cls, v: Any) -> RoleEnum:
        if isinstance(v, RoleEnum):
            return v
        try:
            return RoleEnum(v)
        except ValueError:
            raise PydanticCustomError("role_invalid", INVALID_ROLE_MESSAGE)

    @field_validator("custom_role", mode="before")
    @classmethod
    def _check_custom_role(cls, v: Any, info: ValidationInfo) -> Optional[str]:
        role = info.data.get("role")
        if v is not None:
            if not isinstance(v, str):
                if role is not None and role != RoleEnum.OTHER:
                    return None
                raise PydanticCustomError("custom_role_invalid", CUSTOM_ROLE_INVALID_MESSAGE)
            if len(v) > CUSTOM_ROLE_MAX_LENGTH:
                raise PydanticCustomError("custom_role_too_long", CUSTOM_ROLE_TOO_LONG_MESSAGE)

        # Cross-field rule; skipped while email or role are themselves invalid
        if "email" not in info.data or "role" not in info.data:
            return v
        if role != RoleEnum.OTHER:
            return None
        trimmed = v.strip() if v else ""
        if len(trimmed) < CUSTOM_ROLE_MIN_LENGTH:
            raise PydanticCustomError("custom_role_required", CUSTOM_ROLE_REQUIRED_MESSAGE)
        return trimmed


class WaitlistResult(BaseModel):
    success: bool
    message: str
    error: Optional[str] = None


class RoleOption(BaseModel):
    value: RoleEnum
    label: str


def role_options() -> List[RoleOption]:
    return [RoleOption(value=role, label=label) for role, label in ROLE_LABELS.items()]


def _is_total_length_error(e: EmailNotValidError) -> bool:
    # email-validator caps whole addresses at 254 characters and raises this
    # last, after every syntax check has passed. The local part and domain
    # limits mention the @-sign and stay errors.
    message = str(e)
    return message.startswith("The email address is too long") and "@-sign" not in message


def _field_name(loc: tuple) -> str:
    if not loc:
        return "__root__"
    name = str(loc[0])
    field = WaitlistSubmission.model_fields.get(name)
    # Errors raised while validating a default are reported under the attribute name
    return (field.alias or name) if field is not None else name


def _to_violation(error: dict) -> FieldViolation:
    field = _field_name(error.get("loc", ()))
    if error.get("type") == "missing" and field in _MISSING_MESSAGES:
        return FieldViolation(field=field, message=_MISSING_MESSAGES[field])
    return FieldViolation(field=field, message=error["msg"])


def parse_submission(payload: Any) -> WaitlistSubmission:
    """Validate a raw ``{email, role, customRole?}`` payload.

    Raises :class:`app.core.exceptions.ValidationError` carrying the ordered
    field violations when the payload is not acceptable.
    """
    if not isinstance(payload, dict):
        raise ValidationError([FieldViolation(field="__root__", message=INVALID_BODY_MESSAGE)])
    try:
        return WaitlistSubmission.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError([_to_violation(err) for err in e.errors()]) from None
