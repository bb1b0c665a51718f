"""Value objects for parsed data."""

from dataclasses import dataclass, field

from .language import LanguageOption


@dataclass
class SubmitPageData:
    """Data extracted from a submit page."""

    csrf_token: str
    ftaa: str = ""
    bfaa: str = ""
    options: list[LanguageOption] = field(default_factory=list)
