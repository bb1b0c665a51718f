"""API routes for problem lookup and compiler options."""

from litestar import Controller, get
from litestar.status_codes import HTTP_200_OK
from loguru import logger

from cfsubmit.api.schemas.problem import (
    LanguageOptionResponse,
    LanguageOptionsResponse,
    ProblemResponse,
)
from cfsubmit.domain.models import LanguageKey, ProblemIdentifier
from cfsubmit.services.workflow import SubmissionWorkflow


class ProblemController(Controller):
    """Controller for problem-related endpoints."""

    path = "/problems"

    @get("/parse", status_code=HTTP_200_OK)
    async def parse_filename(self, filename: str) -> ProblemResponse:
        """Derive the problem and language family from a solution filename."""
        problem, language_key = SubmissionWorkflow.parse_filename(filename)
        return ProblemResponse(
            contest_id=problem.contest_id,
            index=problem.index,
            language_key=language_key.value,
            submittable=language_key.submittable,
        )

    @get("/{contest_id:int}/{index:str}/languages", status_code=HTTP_200_OK)
    async def get_languages(
        self,
        contest_id: int,
        index: str,
        workflow: SubmissionWorkflow,
        language: LanguageKey | None = None,
    ) -> LanguageOptionsResponse:
        """
        Get compiler options offered on the submit page.

        Query parameters:
        - language: language family (cpp, python, java) to recommend a compiler for
        """
        logger.debug(f"API request for languages: {contest_id}{index} ({language})")

        problem = ProblemIdentifier(contest_id=contest_id, index=index)
        options, recommended = await workflow.language_options(problem, language)

        return LanguageOptionsResponse(
            contest_id=problem.contest_id,
            index=problem.index,
            options=[LanguageOptionResponse.model_validate(option) for option in options],
            recommended_id=recommended.id if recommended else None,
        )
