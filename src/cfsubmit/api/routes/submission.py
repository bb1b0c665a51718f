"""API routes for submitting and tracking solutions."""

from litestar import Controller, get, post
from litestar.exceptions import NotFoundException
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED
from loguru import logger

from cfsubmit.api.schemas.submission import (
    PollResponse,
    SubmissionResponse,
    SubmitRequest,
    SubmitResponse,
)
from cfsubmit.domain.models import ProblemIdentifier, SubmissionRecord
from cfsubmit.services.status_poller import PollResult
from cfsubmit.services.workflow import SubmissionWorkflow


def _submission_response(record: SubmissionRecord) -> SubmissionResponse:
    return SubmissionResponse(**record.to_dict())


def _poll_response(result: PollResult) -> PollResponse:
    return PollResponse(
        state=result.state.value,
        message=result.message,
        attempts=result.attempts,
        submission=_submission_response(result.record) if result.record else None,
    )


class SubmissionController(Controller):
    """Controller for submission endpoints."""

    path = "/submissions"

    @post("/", status_code=HTTP_201_CREATED)
    async def submit(self, data: SubmitRequest, workflow: SubmissionWorkflow) -> SubmitResponse:
        """Submit a solution to Codeforces."""
        if data.filename is not None:
            problem, file_language = SubmissionWorkflow.parse_filename(data.filename)
        else:
            problem = ProblemIdentifier(contest_id=data.contest_id, index=data.index)
            file_language = None

        logger.debug(f"API request to submit {problem}")
        language_key = data.language_key or file_language
        result = None
        if data.wait_for_verdict:
            outcome, result = await workflow.submit_and_track(
                problem, data.source_code, language_id=data.language_id, language_key=language_key
            )
        else:
            outcome = await workflow.submit(
                problem, data.source_code, language_id=data.language_id, language_key=language_key
            )

        return SubmitResponse(
            contest_id=outcome.request.contest_id,
            index=outcome.request.index,
            language_id=outcome.request.language_id,
            submitted_at=outcome.submitted_at,
            duplicate_warning=outcome.duplicate_warning,
            poll=_poll_response(result) if result else None,
        )

    @get("/{contest_id:int}/{index:str}", status_code=HTTP_200_OK)
    async def get_history(
        self,
        contest_id: int,
        index: str,
        workflow: SubmissionWorkflow,
        handle: str | None = None,
    ) -> list[SubmissionResponse]:
        """Submissions for a problem, newest first."""
        problem = ProblemIdentifier(contest_id=contest_id, index=index)
        records = await workflow.history(problem, handle)
        return [_submission_response(record) for record in records]

    @get("/{contest_id:int}/{index:str}/latest", status_code=HTTP_200_OK)
    async def get_latest(
        self,
        contest_id: int,
        index: str,
        workflow: SubmissionWorkflow,
        handle: str | None = None,
    ) -> SubmissionResponse:
        """Newest submission for a problem."""
        problem = ProblemIdentifier(contest_id=contest_id, index=index)
        record = await workflow.latest(problem, handle)
        if record is None:
            raise NotFoundException(f"No submissions for {problem}")
        return _submission_response(record)

    @post("/{contest_id:int}/{index:str}/poll", status_code=HTTP_200_OK)
    async def poll(
        self,
        contest_id: int,
        index: str,
        workflow: SubmissionWorkflow,
        handle: str | None = None,
        since: float | None = None,
    ) -> PollResponse:
        """
        Wait for the newest submission of a problem to get a final verdict.

        Query parameters:
        - handle: Codeforces handle, defaults to the logged-in one
        - since: only consider submissions created at or after this UNIX time
        """
        problem = ProblemIdentifier(contest_id=contest_id, index=index)
        result = await workflow.track(problem, handle, since)
        return _poll_response(result)
