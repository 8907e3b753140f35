"""
astroblog.validation.core

Result types and the `validate()` entrypoint.

Schemas are plain pydantic models; `validate()` turns pydantic's error list into
`FieldViolation`s so callers branch on a value instead of catching exceptions.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import ErrorDetails

M = TypeVar("M", bound=BaseModel)

ROOT_FIELD = "body"


@dataclass(frozen=True, slots=True)
class FieldViolation:
    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True, slots=True)
class Valid(Generic[M]):
    value: M
    ok: ClassVar[bool] = True


@dataclass(frozen=True, slots=True)
class Invalid:
    violations: tuple[FieldViolation, ...]
    ok: ClassVar[bool] = False

    def as_dict(self) -> dict[str, Any]:
        return {"violations": [v.as_dict() for v in self.violations]}


def validate(schema: type[M], payload: Any) -> Valid[M] | Invalid:
    try:
        return Valid(schema.model_validate(payload))
    except ValidationError as e:
        return Invalid(violations_from(e.errors()))


def violations_from(errors: Sequence[ErrorDetails]) -> tuple[FieldViolation, ...]:
    return tuple(_violation(err) for err in errors)


def _violation(err: ErrorDetails) -> FieldViolation:
    field = ".".join(str(part) for part in err["loc"]) or ROOT_FIELD
    return FieldViolation(field=field, message=_message(err))


def _message(err: ErrorDetails) -> str:
    # Custom rules raise ValueError with the user-facing text; drop pydantic's
    # "Value error, " prefix so the schema's own message comes through.
    if err["type"] == "value_error":
        cause = (err.get("ctx") or {}).get("error")
        if cause is not None:
            return str(cause)
    if err["type"] == "missing":
        return "Field required"
    return err["msg"]
