"""Domain models package."""

from .cookies import Cookie
from .identifiers import ProblemIdentifier
from .language import LanguageKey, LanguageOption
from .parsing import SubmitPageData
from .submission import SubmissionOutcome, SubmissionRecord, SubmissionRequest, Verdict

__all__ = [
    "Cookie",
    "LanguageKey",
    "LanguageOption",
    "ProblemIdentifier",
    "SubmissionOutcome",
    "SubmissionRecord",
    "SubmissionRequest",
    "SubmitPageData",
    "Verdict",
]
