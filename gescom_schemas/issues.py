from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ValidationIssue(BaseModel):
    """One field- or line-level problem a form can render next to its input."""

    model_config = ConfigDict(frozen=True)

    code: str
    field: str | None = None
    message: str
    line_index: int | None = None
    details: dict[str, Any] = Field(default_factory=dict)


def issue_codes(issues: list[ValidationIssue]) -> list[str]:
    return [issue.code for issue in issues]
