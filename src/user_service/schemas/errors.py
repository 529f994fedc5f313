"""
Wire shape of every error response:

    {"title": str, "status": int, "detail": str, "extensions": {"code": str, ...}}

The key names are a client contract; do not rename them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ErrorResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    status: int = Field(ge=400, le=599)
    detail: str
    extensions: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _require_code(self) -> "ErrorResponse":
        if not self.extensions.get("code"):
            raise ValueError("extensions must contain a non-empty 'code'")
        return self

    @property
    def code(self) -> str:
        return self.extensions["code"]

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")
