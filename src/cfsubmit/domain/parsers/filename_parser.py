"""Parser for solution filenames such as ``1873A.cpp``."""

import re
from pathlib import PurePath
from typing import Optional

from loguru import logger

from cfsubmit.domain.models import LanguageKey, ProblemIdentifier


class FilenameParser:
    """Derives a Codeforces problem and language family from a filename."""

    # contest id of 3-6 digits, optional separator, index starting with a letter
    PATTERN = re.compile(r"^(\d{3,6})[_-]?([A-Za-z][0-9A-Za-z]*)$")

    EXTENSIONS: dict[str, LanguageKey] = {
        "c": LanguageKey.CPP,
        "cc": LanguageKey.CPP,
        "cpp": LanguageKey.CPP,
        "cxx": LanguageKey.CPP,
        "hpp": LanguageKey.CPP,
        "h": LanguageKey.CPP,
        "py": LanguageKey.PYTHON,
        "java": LanguageKey.JAVA,
    }

    @classmethod
    def parse(cls, filename: str) -> Optional[ProblemIdentifier]:
        """
        Extract the problem identifier from a filename.

        Returns None when the name does not follow the convention.
        """
        stem = cls._stem(filename)
        match = cls.PATTERN.match(stem)
        if not match:
            logger.debug(f"Filename does not name a problem: {filename!r}")
            return None

        contest_id, index = match.groups()
        identifier = ProblemIdentifier(contest_id=int(contest_id), index=index.upper())
        logger.debug(f"Parsed filename {filename!r} to problem: {identifier}")
        return identifier

    @classmethod
    def language_key_for_extension(cls, extension: str) -> LanguageKey:
        return cls.EXTENSIONS.get(extension.lower().lstrip("."), LanguageKey.PLAINTEXT)

    @classmethod
    def language_key_for_filename(cls, filename: str) -> LanguageKey:
        suffix = PurePath(filename).suffix
        return cls.language_key_for_extension(suffix) if suffix else LanguageKey.PLAINTEXT

    @staticmethod
    def _stem(filename: str) -> str:
        name = PurePath(filename.replace("\\", "/")).name
        if "." in name:
            return name.rsplit(".", 1)[0]
        return name


def parse_problem_filename(filename: str) -> Optional[ProblemIdentifier]:
    """Convenience function to parse a problem identifier from a filename."""
    return FilenameParser.parse(filename)
