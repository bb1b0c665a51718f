"""Pydantic schemas for submission API endpoints."""

from pydantic import BaseModel, model_validator

from cfsubmit.domain.models import LanguageKey


class SubmitRequest(BaseModel):
    """Request to submit a solution.

    The problem comes either from ``contest_id`` + ``index`` or from
    ``filename``; the compiler from ``language_id`` or ``language_key``.
    """

    source_code: str
    contest_id: int | None = None
    index: str | None = None
    filename: str | None = None
    language_id: str | None = None
    language_key: LanguageKey | None = None
    wait_for_verdict: bool = False

    @model_validator(mode="after")
    def check_problem(self) -> "SubmitRequest":
        if self.filename is None and (self.contest_id is None or self.index is None):
            raise ValueError("Provide either filename or contest_id and index")
        return self


class SubmissionResponse(BaseModel):
    """Submission snapshot from Codeforces."""

    id: int
    verdict: str
    creation_time: int
    language: str | None = None
    author_handle: str | None = None
    passed_test_count: int | None = None
    time_ms: int | None = None
    memory_bytes: int | None = None
    contest_id: int | None = None
    problem_index: str | None = None
    problem_name: str | None = None


class PollResponse(BaseModel):
    """Outcome of a verdict poll."""

    state: str
    message: str
    attempts: int
    submission: SubmissionResponse | None = None


class SubmitResponse(BaseModel):
    """Accepted submission, with its verdict when it was awaited."""

    contest_id: int
    index: str
    language_id: str
    submitted_at: float
    duplicate_warning: bool
    poll: PollResponse | None = None


class HandleResponse(BaseModel):
    """Current Codeforces login."""

    handle: str | None = None
    logged_in: bool
