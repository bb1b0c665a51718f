"""Value objects for problem identification."""

import re
from dataclasses import dataclass

from cfsubmit.domain.exceptions import ParseError

INDEX_PATTERN = re.compile(r"^[A-Z][0-9A-Z]*$")
MIN_CONTEST_ID = 100
MAX_CONTEST_ID = 999_999


@dataclass(frozen=True)
class ProblemIdentifier:
    """Identifies a specific Codeforces problem.

    Raises ParseError on a contest id outside 3-6 digits or an index that
    does not start with a letter.
    """

    contest_id: int
    index: str

    def __post_init__(self) -> None:
        try:
            contest_id = int(self.contest_id)
        except (TypeError, ValueError) as e:
            raise ParseError(f"Invalid contest id: {self.contest_id!r}") from e
        if not MIN_CONTEST_ID <= contest_id <= MAX_CONTEST_ID:
            raise ParseError(f"Contest id must have 3 to 6 digits: {contest_id}")

        index = str(self.index).strip().upper()
        if not INDEX_PATTERN.match(index):
            raise ParseError(f"Invalid problem index: {self.index!r}")

        object.__setattr__(self, "contest_id", contest_id)
        object.__setattr__(self, "index", index)

    @property
    def cache_key(self) -> str:
        return f"{self.contest_id}-{self.index}"

    def __str__(self) -> str:
        """String representation."""
        return f"{self.contest_id}{self.index}"
