"""Schema comparison result models."""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class BreakingChange(BaseModel):
    """A single backward-incompatible schema change."""

    type: str
    description: str


class ParseFailure(BaseModel):
    """Schema text failed to parse or is not a valid SDL document."""

    kind: Literal["parse"] = "parse"
    message: str
    snippet: Optional[str] = None


class CompareFailure(BaseModel):
    """Unexpected failure while decoding, building or diffing schemas."""

    kind: Literal["compare"] = "compare"
    message: str


class ComparisonSuccess(BaseModel):
    """Both schemas built; ``breaking_changes`` keeps emission order."""

    kind: Literal["ok"] = "ok"
    breaking_changes: List[BreakingChange] = []

    @property
    def is_clean(self) -> bool:
        return not self.breaking_changes


SchemaComparison = Annotated[
    Union[ParseFailure, CompareFailure, ComparisonSuccess],
    Field(discriminator="kind"),
]


class SchemaFileResult(BaseModel):
    """Outcome of analysing one changed schema file."""

    file: str
    content_url: Optional[str] = None
    comparison: SchemaComparison

    @property
    def is_clean(self) -> bool:
        return self.comparison.kind == "ok" and self.comparison.is_clean
