from __future__ import annotations
from typing import Any, Dict, Literal

from pydantic import BaseModel, Field

IndicatorStatus = Literal["up", "down"]


class IndicatorResult(BaseModel):
    status: IndicatorStatus
    details: Dict[str, Any] = Field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {"status": self.status, **self.details}


class HealthReport(BaseModel):
    status: Literal["ok", "error"]
    info: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    error: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    details: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    @property
    def healthy(self) -> bool:
        return self.status == "ok"
