from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictStr, ValidationError

from gateway.auth.errors import ValidationFailure
from gateway.auth.models import FieldError


class CredentialPayload(BaseModel):
    """Email/password pair submitted to sign-up and sign-in."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    email: EmailStr
    # Strength is enforced by the provider; we only require something to send.
    password: StrictStr = Field(min_length=1)


def _field_errors(exc: ValidationError) -> List[FieldError]:
    seen: Dict[str, FieldError] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        name = str(loc[0]) if loc else "body"
        if name not in seen:
            seen[name] = FieldError(field=name, message=str(err.get("msg") or "Invalid value"))
    return list(seen.values())


def validate_credentials(payload: Any) -> CredentialPayload:
    """
    Validate a credential payload.

    Raises ValidationFailure with one entry per invalid field. No side effects.
    """
    if not isinstance(payload, dict):
        raise ValidationFailure([FieldError(field="body", message="Request body must be a JSON object")])
    try:
        return CredentialPayload.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailure(_field_errors(e)) from e
