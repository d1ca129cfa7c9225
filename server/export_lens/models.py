from typing import List
from pydantic import BaseModel, Field

class MatchRequest(BaseModel):
    source: str
    name: str = Field(..., min_length=1)
    # Parse with the TSX grammar (needed when initializers contain JSX).
    tsx: bool = False

class ExportMatchInfo(BaseModel):
    form: str  # "function", "variable", "destructured", "specifier"
    start_line: int
    end_line: int

class MatchResponse(BaseModel):
    name: str
    exported: bool
    matches: List[ExportMatchInfo] = Field(default_factory=list)

class StripRequest(BaseModel):
    source: str
    names: List[str] = Field(..., min_length=1)
    tsx: bool = False

class StrippedDeclaration(BaseModel):
    start_line: int
    end_line: int
    # One entry per object pattern in the declaration, outermost first.
    remaining: List[List[str]] = Field(default_factory=list)

class StripResponse(BaseModel):
    removed_count: int
    declarations: List[StrippedDeclaration] = Field(default_factory=list)
