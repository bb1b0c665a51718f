"""Unit tests for the Codeforces JSON API client."""

import json
from unittest.mock import AsyncMock

import pytest

from cfsubmit.domain.exceptions import ApiError, NetworkError
from cfsubmit.domain.models import ProblemIdentifier, Verdict
from cfsubmit.infrastructure.codeforces_client import CodeforcesApiClient
from cfsubmit.infrastructure.http_client import HTTPResponse

PROBLEM = ProblemIdentifier(contest_id=1873, index="A")


def api_submission(submission_id, verdict, creation_time, contest_id=1873, index="A", name="Short Sort"):
    item = {
        "id": submission_id,
        "contestId": contest_id,
        "creationTimeSeconds": creation_time,
        "problem": {"contestId": contest_id, "index": index, "name": name},
        "author": {"members": [{"handle": "tourist"}]},
        "programmingLanguage": "GNU G++17 7.3.0",
        "passedTestCount": 5,
        "timeConsumedMillis": 15,
        "memoryConsumedBytes": 102400,
    }
    if verdict is not None:
        item["verdict"] = verdict
    return item


def envelope(result=None, status="OK", comment=None, status_code=200):
    body = {"status": status}
    if result is not None:
        body["result"] = result
    if comment is not None:
        body["comment"] = comment
    return HTTPResponse(status_code=status_code, url="https://codeforces.com/api/x", text=json.dumps(body))


def make_client(*responses):
    http_client = AsyncMock()
    http_client.get.side_effect = list(responses)
    return CodeforcesApiClient(http_client, min_interval=0.0), http_client


@pytest.mark.asyncio
async def test_contest_status_parses_records():
    """Test that API items become submission records."""
    # Setup mocks
    client, http_client = make_client(envelope([api_submission(10, "OK", 1_700_000_000)]))

    # Execute
    records = await client.contest_status(1873, "tourist", count=5)

    # Verify
    assert len(records) == 1
    record = records[0]
    assert record.id == 10
    assert record.verdict is Verdict.OK
    assert record.author_handle == "tourist"
    assert record.problem_index == "A"
    assert record.memory_bytes == 102400

    args, kwargs = http_client.get.call_args
    assert args[0] == "https://codeforces.com/api/contest.status"
    assert kwargs["params"] == {"contestId": 1873, "from": 1, "count": 5, "handle": "tourist"}
    assert kwargs["check_status"] is False


@pytest.mark.asyncio
async def test_missing_verdict_means_testing():
    client, _ = make_client(envelope([api_submission(10, None, 1_700_000_000)]))

    records = await client.contest_status(1873)

    assert records[0].verdict is Verdict.TESTING


@pytest.mark.asyncio
async def test_submissions_for_filters_problem_and_sorts_newest_first():
    """Test that other problems and cancelled runs are dropped."""
    client, _ = make_client(
        envelope(
            [
                api_submission(1, "WRONG_ANSWER", 100),
                api_submission(2, "OK", 300),
                api_submission(3, "OK", 200, index="B"),
                api_submission(4, "CANCELLED", 400),
            ]
        )
    )

    records = await client.submissions_for(PROBLEM, "tourist")

    assert [r.id for r in records] == [2, 1]


@pytest.mark.asyncio
async def test_submissions_for_falls_back_to_user_status():
    """Test that a failing contest.status falls back to user.status."""
    # Setup mocks
    client, http_client = make_client(
        envelope(status="FAILED", comment="contestId: Contest with id 1873 has not started", status_code=400),
        envelope(
            [
                api_submission(7, "OK", 500, contest_id=1872, name="Short Sort"),
                api_submission(8, "OK", 600, contest_id=1900, index="C", name="Other"),
            ]
        ),
    )

    # Execute
    records = await client.submissions_for(PROBLEM, "tourist", problem_name="  short   sort ")

    # Verify
    assert [r.id for r in records] == [7]
    assert http_client.get.call_args.args[0] == "https://codeforces.com/api/user.status"


@pytest.mark.asyncio
async def test_latest_submission():
    client, _ = make_client(
        envelope([api_submission(1, "WRONG_ANSWER", 100), api_submission(2, "TESTING", 300)])
    )

    latest = await client.latest_submission(PROBLEM, "tourist")

    assert latest.id == 2
    assert latest.verdict is Verdict.TESTING


@pytest.mark.asyncio
async def test_failed_envelope_raises_api_error():
    client, _ = make_client(envelope(status="FAILED", comment="handle: User with handle nobody not found"))

    with pytest.raises(ApiError) as exc_info:
        await client.user_status("nobody")

    assert exc_info.value.comment == "handle: User with handle nobody not found"


@pytest.mark.asyncio
async def test_non_json_response_is_network_error():
    client, _ = make_client(HTTPResponse(status_code=502, url="https://codeforces.com/api/x", text="<html>Bad Gateway</html>"))

    with pytest.raises(NetworkError):
        await client.user_status("tourist")


@pytest.mark.asyncio
async def test_rate_limit_comment_is_retried(monkeypatch):
    """Test that a call-limit answer is retried before failing."""

    async def no_sleep(delay):
        return None

    monkeypatch.setattr("cfsubmit.infrastructure.codeforces_client.asyncio.sleep", no_sleep)
    client, http_client = make_client(
        envelope(status="FAILED", comment="Call limit exceeded"),
        envelope([api_submission(1, "OK", 100)]),
    )

    records = await client.user_status("tourist")

    assert [r.id for r in records] == [1]
    assert http_client.get.await_count == 2
