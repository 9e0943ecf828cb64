import logging
from typing import Optional

from .pipeline.scheduler import JudgeScheduler
from .pipeline.store import Submission, VerdictStoreInterface


class IntakeError(ValueError):
    pass


class JudgeUnavailableError(RuntimeError):
    """Raised when submissions arrive while the judge is not accepting work."""
    pass


class SubmissionIntake:
    """Validates new submissions, stores them as PENDING and queues them for judging."""

    def __init__(self,
                 store: VerdictStoreInterface,
                 scheduler: JudgeScheduler,
                 code_size_limit: int,
                 logger: logging.Logger):
        self.store = store
        self.scheduler = scheduler
        self.code_size_limit = code_size_limit
        self.logger = logger

    def submit(self,
               contest_id: Optional[int],
               problem_id: Optional[int],
               username: Optional[str],
               code: Optional[str],
               language: Optional[str]) -> Submission:
        self.validate(contest_id, problem_id, username, code)
        if not self.scheduler.running:
            raise JudgeUnavailableError("Judge is not accepting submissions")

        if self.store.find_contest(contest_id) is None:
            raise IntakeError("Contest not found")
        if self.store.find_problem(problem_id) is None:
            raise IntakeError("Problem not found")

        user = self.store.get_or_create_user(username.strip())
        submission = self.store.save_submission(Submission(contest_id=contest_id,
                                                           problem_id=problem_id,
                                                           code=code,
                                                           language=language,
                                                           username=user.username))
        self.logger.info("Submission '%s' of '%s' for problem '%s' accepted for judging",
                         submission.id, submission.username, problem_id)
        self.scheduler.enqueue(submission.id)
        return submission

    def validate(self,
                 contest_id: Optional[int],
                 problem_id: Optional[int],
                 username: Optional[str],
                 code: Optional[str]):
        if contest_id is None:
            raise IntakeError("contestId is required")
        if problem_id is None:
            raise IntakeError("problemId is required")
        if username is None or not username.strip():
            raise IntakeError("username is required")
        if code is None or not code.strip():
            raise IntakeError("code is required")
        if len(code) > self.code_size_limit:
            raise IntakeError("code is too long")
