"""Value objects for compiler selection."""

from dataclasses import dataclass
from enum import Enum


class LanguageKey(str, Enum):
    """Coarse language family used to pick a compiler."""

    CPP = "cpp"
    PYTHON = "python"
    JAVA = "java"
    PLAINTEXT = "plaintext"

    @property
    def submittable(self) -> bool:
        return self is not LanguageKey.PLAINTEXT


@dataclass(frozen=True)
class LanguageOption:
    """One entry of the compiler dropdown on the submit page."""

    id: str
    display_text: str
