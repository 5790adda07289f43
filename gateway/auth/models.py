from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Identity:
    """Authenticated identity returned by the provider. Only the id is kept."""

    user_id: str


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class StructuredError:
    """Error returned to the client; `field` is set only when attributable."""

    status_code: int
    message: str
    field: Optional[str] = None
    errors: List[FieldError] = dataclass_field(default_factory=list)

    def to_body(self) -> Dict[str, Any]:
        # JSend: "fail" for client-correctable problems, "error" for server-side ones.
        body: Dict[str, Any] = {
            "status": "error" if self.status_code >= 500 else "fail",
            "message": self.message,
        }
        if self.field:
            body["field"] = self.field
        if self.errors:
            body["errors"] = [{"field": e.field, "message": e.message} for e in self.errors]
        return body


def success_body() -> Dict[str, Any]:
    return {"status": "success", "data": None}
