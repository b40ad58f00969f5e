from typing import Literal

from pydantic import BaseModel


class StatusCheck(BaseModel):
    name: str
    status: Literal["ok", "error"]
    message: str | None = None


class SystemStatusResponse(BaseModel):
    healthy: bool
    checks: list[StatusCheck]
