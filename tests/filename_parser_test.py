# tests/filename_parser_test.py
import pytest
from cfsubmit.domain.parsers.filename_parser import FilenameParser, parse_problem_filename
from cfsubmit.domain.models import LanguageKey, ProblemIdentifier
from cfsubmit.domain.exceptions import ParseError

@pytest.mark.parametrize(
    "filename, expected_contest, expected_index",
    [
        ("1873A.cpp", 1873, "A"),
        ("1873_A2.py", 1873, "A2"),
        ("1873-b.java", 1873, "B"),
        ("123C.txt", 123, "C"),
        ("/home/me/cf/2000F1.cc", 2000, "F1"),
        ("C:\\solutions\\1850G.cpp", 1850, "G"),
    ],
)
def test_parse_valid_filenames(filename, expected_contest, expected_index) -> None:
    identifier = FilenameParser.parse(filename)

    assert identifier is not None
    assert identifier.contest_id == expected_contest
    assert identifier.index == expected_index

@pytest.mark.parametrize(
    "filename",
    ["readme.txt", "main.cpp", "12A.cpp", "1234567A.cpp", "1873.cpp", "1873_.py", ""],
)
def test_parse_rejects_other_names(filename) -> None:
    assert FilenameParser.parse(filename) is None

def test_parse_convenience_function() -> None:
    identifier = parse_problem_filename("777a.py")

    assert identifier == ProblemIdentifier(contest_id=777, index="A")

@pytest.mark.parametrize(
    "filename, expected_key",
    [
        ("1873A.cpp", LanguageKey.CPP),
        ("1873A.CC", LanguageKey.CPP),
        ("1873A.c", LanguageKey.CPP),
        ("1873A.py", LanguageKey.PYTHON),
        ("1873A.java", LanguageKey.JAVA),
        ("1873A.rs", LanguageKey.PLAINTEXT),
        ("1873A", LanguageKey.PLAINTEXT),
    ],
)
def test_language_key_for_filename(filename, expected_key) -> None:
    assert FilenameParser.language_key_for_filename(filename) == expected_key

def test_plaintext_is_not_submittable() -> None:
    assert not LanguageKey.PLAINTEXT.submittable
    assert LanguageKey.CPP.submittable

def test_identifier_cache_key() -> None:
    identifier = ProblemIdentifier(contest_id="1873", index="b1")
    assert identifier.contest_id == 1873
    assert identifier.cache_key == "1873-B1"
    assert str(identifier) == "1873B1"

def test_identifier_normalizes_index() -> None:
    identifier = ProblemIdentifier(contest_id=100, index=" c2 ")
    assert identifier.index == "C2"
    assert ProblemIdentifier(contest_id=999999, index="A").contest_id == 999999

@pytest.mark.parametrize(
    "contest_id, index",
    [
        (0, "A"),
        (12, "A"),
        (1234567, "A"),
        ("abc", "A"),
        (1873, "1A"),
        (1873, "-x&y"),
        (1873, "A/../B"),
        (1873, ""),
    ],
)
def test_identifier_rejects_invalid_values(contest_id, index) -> None:
    with pytest.raises(ParseError):
        ProblemIdentifier(contest_id=contest_id, index=index)
