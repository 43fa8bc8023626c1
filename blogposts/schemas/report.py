from typing import List, Literal, Optional

from pydantic import BaseModel, Field, computed_field

Severity = Literal["error", "warning"]


class Issue(BaseModel):
    path: str
    severity: Severity
    code: str
    message: str
    line: Optional[int] = None


class DuplicateGroup(BaseModel):
    canonical: str
    duplicates: List[str]
    paths: List[str] = Field(
        default_factory=list,
        description="Member files, canonical first, in the order of duplicates.",
    )
    reason: Literal["title", "body"]
    similarity: float = Field(
        ...,
        ge=0,
        le=1,
        description="Highest similarity ratio between any two posts in the group.",
    )


class CheckReport(BaseModel):
    checked: int = 0
    issues: List[Issue] = Field(default_factory=list)
    duplicates: List[DuplicateGroup] = Field(default_factory=list)

    @computed_field
    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")

    @computed_field
    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "warning")

    @computed_field
    @property
    def ok(self) -> bool:
        return self.error_count == 0
