from cfsubmit.api.routes.problem import ProblemController
from cfsubmit.api.routes.session import SessionController
from cfsubmit.api.routes.submission import SubmissionController

__all__ = ["ProblemController", "SessionController", "SubmissionController"]
