"""Pydantic schemas for problem API endpoints."""

from pydantic import BaseModel


class ProblemResponse(BaseModel):
    """Problem derived from a filename."""

    contest_id: int
    index: str
    language_key: str
    submittable: bool


class LanguageOptionResponse(BaseModel):
    """One compiler choice from the submit page."""

    id: str
    display_text: str

    class Config:
        from_attributes = True


class LanguageOptionsResponse(BaseModel):
    """Compiler choices for a problem."""

    contest_id: int
    index: str
    options: list[LanguageOptionResponse]
    recommended_id: str | None = None
