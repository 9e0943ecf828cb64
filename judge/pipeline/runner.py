"""Main class for judging a single submission."""
import logging
from typing import Optional

from .comparator import ResultComparator
from .execution import ExecutionClientInterface, ExecutionFailure, Success, Timeout
from .store import StateError, Submission, SubmissionStatus, VerdictStoreInterface


class SubmissionRunner:
    """
    Drives one submission through the test cases of its problem, in order, and records the
    verdict. Every state change is saved right away, so readers can watch a submission go
    from RUNNING to its verdict. The first failing test case ends the run.
    """

    TIMED_OUT_MESSAGE = 'Timed out during execution'
    PROBLEM_NOT_FOUND_MESSAGE = 'Problem not found'

    def __init__(self,
                 store: VerdictStoreInterface,
                 execution_client: ExecutionClientInterface,
                 comparator: ResultComparator,
                 logger: logging.Logger):
        self.store = store
        self.execution_client = execution_client
        self.comparator = comparator
        self.logger = logger

    async def run(self, submission_id: int) -> Optional[Submission]:
        submission = self.store.find_submission(submission_id)
        if submission is None:
            self.logger.warning("Submission '%s' not found, nothing to judge", submission_id)
            return None

        self.change_state(submission, SubmissionStatus.RUNNING, requires=SubmissionStatus.PENDING)

        problem = self.store.find_problem(submission.problem_id)
        if problem is None:
            return self.finish(submission, SubmissionStatus.ERROR, self.PROBLEM_NOT_FOUND_MESSAGE)

        result_log = []
        for index, test_case in enumerate(problem.test_cases, start=1):
            outcome = await self.execution_client.execute(submission.code,
                                                          submission.language,
                                                          test_case.input_data)
            match outcome:
                case Timeout():
                    return self.finish(submission, SubmissionStatus.TIMED_OUT, self.TIMED_OUT_MESSAGE)
                case ExecutionFailure(message=message):
                    return self.finish(submission, SubmissionStatus.ERROR, f'Execution error: {message}')
                case Success(result=result):
                    output = result.text
                    result_log.append(f'TC #{index} output:\n{output}\n')
                    if result.compilation_failed:
                        return self.finish(submission, SubmissionStatus.COMPILATION_ERROR,
                                           f'Compilation error on testcase {index}\n' + ''.join(result_log))
                    if not self.comparator.equivalent(output, test_case.expected_output):
                        return self.finish(submission, SubmissionStatus.WRONG_ANSWER,
                                           f'Wrong answer on testcase {index}\n' + ''.join(result_log))
                case _:
                    raise TypeError(f"Unknown execution outcome: {outcome!r}")

        return self.finish(submission, SubmissionStatus.ACCEPTED, 'All tests passed\n' + ''.join(result_log))

    async def trash(self, submission_id: int, error: Exception):
        """Finishes a submission left RUNNING by an unexpected error as ERROR."""
        submission = self.store.find_submission(submission_id)
        if submission is None or submission.status != SubmissionStatus.RUNNING:
            return
        self.logger.info("Trashing submission '%s'", submission_id)
        self.finish(submission, SubmissionStatus.ERROR, f'Internal judge error: {error}')

    def finish(self, submission: Submission, verdict: SubmissionStatus, message: str) -> Submission:
        submission.result_message = message
        return self.change_state(submission, verdict, requires=SubmissionStatus.RUNNING)

    def change_state(self,
                     submission: Submission,
                     new_state: SubmissionStatus,
                     requires: SubmissionStatus | list[SubmissionStatus] | None) -> Submission:
        old_state = submission.status
        try:
            submission.change_state(new_state, requires)
        except StateError as e:
            self.logger.error(str(e))
            raise
        saved = self.store.save_submission(submission)
        self.logger.info("State of submission '%s': %s -> %s",
                         submission.id, old_state.name, new_state.name)
        return saved
