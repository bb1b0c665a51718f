"""Unit tests for the HTTP API."""

from unittest.mock import create_autospec

import pytest
from litestar.testing import TestClient

from cfsubmit.api import create_app
from cfsubmit.domain.exceptions import AuthError, NetworkError, SubmissionRejected
from cfsubmit.domain.models import (
    LanguageKey,
    LanguageOption,
    ProblemIdentifier,
    SubmissionOutcome,
    SubmissionRecord,
    SubmissionRequest,
    Verdict,
)
from cfsubmit.services.status_poller import PollResult, PollState
from cfsubmit.services.workflow import SubmissionWorkflow

PROBLEM = ProblemIdentifier(contest_id=1873, index="A")


@pytest.fixture
def workflow():
    return create_autospec(SubmissionWorkflow, instance=True)


@pytest.fixture
def client(workflow):
    with TestClient(app=create_app(workflow)) as test_client:
        yield test_client


def test_parse_filename(client):
    response = client.get("/problems/parse", params={"filename": "1873a.py"})

    assert response.status_code == 200
    assert response.json() == {
        "contest_id": 1873,
        "index": "A",
        "language_key": "python",
        "submittable": True,
    }


def test_parse_invalid_filename_is_422(client):
    response = client.get("/problems/parse", params={"filename": "readme.txt"})

    assert response.status_code == 422
    assert response.json()["error"] == "ParseError"


def test_get_languages(client, workflow):
    """Test that compiler options and the recommendation are returned."""
    # Setup mocks
    options = [
        LanguageOption(id="54", display_text="GNU G++17 7.3.0"),
        LanguageOption(id="91", display_text="GNU G++23 14.2 (64 bit, msys2)"),
    ]
    workflow.language_options.return_value = (options, options[1])

    # Execute
    response = client.get("/problems/1873/a/languages", params={"language": "cpp"})

    # Verify
    assert response.status_code == 200
    data = response.json()
    assert data["recommended_id"] == "91"
    assert [option["id"] for option in data["options"]] == ["54", "91"]
    workflow.language_options.assert_awaited_once_with(PROBLEM, LanguageKey.CPP)


def test_submit_by_filename(client, workflow):
    """Test that the problem and language come from the filename."""
    # Setup mocks
    request = SubmissionRequest(contest_id=1873, index="A", source_code="print(1)", language_id="70")
    workflow.submit.return_value = SubmissionOutcome(
        request=request, submitted_at=1_700_000_000.0, duplicate_warning=True
    )

    # Execute
    response = client.post("/submissions", json={"filename": "1873A.py", "source_code": "print(1)"})

    # Verify
    assert response.status_code == 201
    assert response.json() == {
        "contest_id": 1873,
        "index": "A",
        "language_id": "70",
        "submitted_at": 1_700_000_000.0,
        "duplicate_warning": True,
        "poll": None,
    }
    workflow.submit.assert_awaited_once_with(
        PROBLEM, "print(1)", language_id=None, language_key=LanguageKey.PYTHON
    )


def test_submit_without_problem_is_rejected(client, workflow):
    response = client.post("/submissions", json={"source_code": "print(1)", "language_key": "python"})

    assert response.status_code == 400
    workflow.submit.assert_not_awaited()


@pytest.mark.parametrize(
    "error, expected_status",
    [
        (AuthError("Not logged in to Codeforces"), 401),
        (SubmissionRejected("Source code is too long"), 409),
        (NetworkError("HTTP 503 for https://codeforces.com"), 502),
    ],
)
def test_submit_errors_map_to_status_codes(client, workflow, error, expected_status):
    workflow.submit.side_effect = error

    response = client.post(
        "/submissions",
        json={"contest_id": 1873, "index": "A", "source_code": "x", "language_id": "54"},
    )

    assert response.status_code == expected_status
    assert response.json()["detail"] == str(error)


def test_history(client, workflow):
    workflow.history.return_value = [
        SubmissionRecord(id=2, verdict=Verdict.OK, creation_time=200, contest_id=1873, problem_index="A"),
        SubmissionRecord(id=1, verdict=Verdict.WRONG_ANSWER, creation_time=100, contest_id=1873, problem_index="A"),
    ]

    response = client.get("/submissions/1873/A", params={"handle": "tourist"})

    assert response.status_code == 200
    assert [item["verdict"] for item in response.json()] == ["OK", "WRONG_ANSWER"]
    workflow.history.assert_awaited_once_with(PROBLEM, "tourist")


def test_poll(client, workflow):
    record = SubmissionRecord(id=2, verdict=Verdict.OK, creation_time=200, contest_id=1873, problem_index="A")
    workflow.track.return_value = PollResult(
        state=PollState.TERMINAL, problem=PROBLEM, handle="tourist", record=record, attempts=3
    )

    response = client.post("/submissions/1873/A/poll", params={"handle": "tourist"})

    assert response.status_code == 200
    data = response.json()
    assert data["state"] == "terminal"
    assert data["message"] == "OK"
    assert data["attempts"] == 3
    assert data["submission"]["id"] == 2


def test_current_handle(client, workflow):
    workflow.current_handle.return_value = "tourist"

    response = client.get("/session/handle")

    assert response.status_code == 200
    assert response.json() == {"handle": "tourist", "logged_in": True}


@pytest.mark.parametrize("path", ["/problems/0/A/languages", "/problems/1873/1A/languages"])
def test_invalid_problem_in_path_is_422(client, workflow, path):
    response = client.get(path)

    assert response.status_code == 422
    assert response.json()["error"] == "ParseError"
    workflow.language_options.assert_not_awaited()


def test_submit_with_invalid_contest_id_is_422(client, workflow):
    response = client.post(
        "/submissions",
        json={"contest_id": 5, "index": "A", "source_code": "x", "language_id": "54"},
    )

    assert response.status_code == 422
    workflow.submit.assert_not_awaited()


def test_submit_and_wait_for_verdict(client, workflow):
    """Test that waiting for the verdict folds the poll result into the response."""
    # Setup mocks
    request = SubmissionRequest(contest_id=1873, index="A", source_code="x", language_id="54")
    outcome = SubmissionOutcome(request=request, submitted_at=1_700_000_000.0)
    record = SubmissionRecord(id=2, verdict=Verdict.OK, creation_time=200, contest_id=1873, problem_index="A")
    result = PollResult(state=PollState.TERMINAL, problem=PROBLEM, handle="tourist", record=record, attempts=2)
    workflow.submit_and_track.return_value = (outcome, result)

    # Execute
    response = client.post(
        "/submissions",
        json={
            "contest_id": 1873,
            "index": "A",
            "source_code": "x",
            "language_id": "54",
            "wait_for_verdict": True,
        },
    )

    # Verify
    assert response.status_code == 201
    data = response.json()
    assert data["poll"]["state"] == "terminal"
    assert data["poll"]["submission"]["id"] == 2
    workflow.submit.assert_not_awaited()
    workflow.submit_and_track.assert_awaited_once_with(PROBLEM, "x", language_id="54", language_key=None)


def test_latest(client, workflow):
    workflow.latest.return_value = SubmissionRecord(
        id=2, verdict=Verdict.OK, creation_time=200, contest_id=1873, problem_index="A"
    )

    response = client.get("/submissions/1873/A/latest", params={"handle": "tourist"})

    assert response.status_code == 200
    assert response.json()["id"] == 2
    workflow.latest.assert_awaited_once_with(PROBLEM, "tourist")


def test_latest_without_submissions_is_404(client, workflow):
    workflow.latest.return_value = None

    response = client.get("/submissions/1873/A/latest")

    assert response.status_code == 404
