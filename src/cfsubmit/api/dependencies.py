from litestar.datastructures import State

from cfsubmit.services.workflow import SubmissionWorkflow


def provide_workflow(state: State) -> SubmissionWorkflow:
    return state.workflow
