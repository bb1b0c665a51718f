"""Submission value objects and verdicts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .identifiers import ProblemIdentifier


class Verdict(str, Enum):
    """Judge outcome as reported by the Codeforces API."""

    OK = "OK"
    FAILED = "FAILED"
    PARTIAL = "PARTIAL"
    COMPILATION_ERROR = "COMPILATION_ERROR"
    RUNTIME_ERROR = "RUNTIME_ERROR"
    WRONG_ANSWER = "WRONG_ANSWER"
    PRESENTATION_ERROR = "PRESENTATION_ERROR"
    TIME_LIMIT_EXCEEDED = "TIME_LIMIT_EXCEEDED"
    MEMORY_LIMIT_EXCEEDED = "MEMORY_LIMIT_EXCEEDED"
    IDLENESS_LIMIT_EXCEEDED = "IDLENESS_LIMIT_EXCEEDED"
    SECURITY_VIOLATED = "SECURITY_VIOLATED"
    CRASHED = "CRASHED"
    INPUT_PREPARATION_CRASHED = "INPUT_PREPARATION_CRASHED"
    CHALLENGED = "CHALLENGED"
    SKIPPED = "SKIPPED"
    TESTING = "TESTING"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_raw(cls, raw: str | None) -> Verdict:
        # The API omits the field while the submission waits in queue.
        if raw is None:
            return cls.TESTING
        try:
            return cls(raw)
        except ValueError:
            if "CANCEL" in raw.upper():
                return cls.CANCELLED
            return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self is not Verdict.TESTING


@dataclass
class SubmissionRequest:
    """Everything needed for one submit call."""

    contest_id: int
    index: str
    source_code: str
    language_id: str

    @property
    def problem(self) -> ProblemIdentifier:
        return ProblemIdentifier(contest_id=self.contest_id, index=self.index)


@dataclass
class SubmissionOutcome:
    """Result of a successful submit call."""

    request: SubmissionRequest
    submitted_at: float
    duplicate_warning: bool = False


@dataclass
class SubmissionRecord:
    """Snapshot of one submission as returned by the Codeforces API."""

    id: int
    verdict: Verdict
    creation_time: int
    language: str | None = None
    author_handle: str | None = None
    passed_test_count: int | None = None
    time_ms: int | None = None
    memory_bytes: int | None = None
    contest_id: int | None = None
    problem_index: str | None = None
    problem_name: str | None = None

    def matches(self, problem: ProblemIdentifier) -> bool:
        contest_id = self.contest_id if self.contest_id is not None else problem.contest_id
        return contest_id == problem.contest_id and (self.problem_index or "").upper() == problem.index

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SubmissionRecord:
        problem = data.get("problem", {})
        members = data.get("author", {}).get("members", [])
        contest_id = problem.get("contestId", data.get("contestId"))
        return cls(
            id=data["id"],
            verdict=Verdict.from_raw(data.get("verdict")),
            creation_time=data.get("creationTimeSeconds", 0),
            language=data.get("programmingLanguage"),
            author_handle=members[0].get("handle") if members else None,
            passed_test_count=data.get("passedTestCount"),
            time_ms=data.get("timeConsumedMillis"),
            memory_bytes=data.get("memoryConsumedBytes"),
            contest_id=contest_id,
            problem_index=problem.get("index"),
            problem_name=problem.get("name"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "verdict": self.verdict.value,
            "creation_time": self.creation_time,
            "language": self.language,
            "author_handle": self.author_handle,
            "passed_test_count": self.passed_test_count,
            "time_ms": self.time_ms,
            "memory_bytes": self.memory_bytes,
            "contest_id": self.contest_id,
            "problem_index": self.problem_index,
            "problem_name": self.problem_name,
        }
