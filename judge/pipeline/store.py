import itertools
import logging
from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class StateError(Exception):
    pass


class SubmissionStatus(str, Enum):
    PENDING = 'PENDING'
    RUNNING = 'RUNNING'
    ACCEPTED = 'ACCEPTED'
    WRONG_ANSWER = 'WRONG_ANSWER'
    COMPILATION_ERROR = 'COMPILATION_ERROR'
    TIMED_OUT = 'TIMED_OUT'
    ERROR = 'ERROR'

    @property
    def is_terminal(self) -> bool:
        return self not in (SubmissionStatus.PENDING, SubmissionStatus.RUNNING)

    @property
    def rank(self) -> int:
        if self == SubmissionStatus.PENDING:
            return 0
        if self == SubmissionStatus.RUNNING:
            return 1
        return 2


@dataclass
class TestCase:
    __test__ = False  # not a pytest class

    input_data: str
    expected_output: str


@dataclass
class Problem:
    title: str
    statement: str = ''
    test_cases: list[TestCase] = field(default_factory=list)
    contest_id: Optional[int] = None
    id: Optional[int] = None


@dataclass
class Contest:
    name: str
    id: Optional[int] = None


@dataclass
class User:
    username: str
    id: Optional[int] = None


@dataclass
class Submission:
    contest_id: int
    problem_id: int
    code: str
    language: Optional[str]
    username: str
    status: SubmissionStatus = SubmissionStatus.PENDING
    result_message: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    id: Optional[int] = None

    def change_state(self,
                     new_state: SubmissionStatus,
                     requires: SubmissionStatus | list[SubmissionStatus] | None):
        """
        Moves the submission forward through the verdict state machine. Entering a terminal
        state stamps ``finished_at``.
        """
        if requires is not None:
            self.requires(requires)
        if new_state.rank <= self.status.rank:
            raise StateError(f"Illegal state change of submission '{self.id}': "
                             f"{self.status.name} -> {new_state.name}")
        self.status = new_state
        if new_state.is_terminal:
            self.finished_at = datetime.now()

    def requires(self, states: SubmissionStatus | list[SubmissionStatus]):
        if isinstance(states, SubmissionStatus):
            states = [states]
        if self.status not in states:
            raise StateError(f"Any of {[s.name for s in states]} is required, "
                             f"but state of submission '{self.id}' is {self.status.name}")

    @property
    def is_finished(self) -> bool:
        return self.status.is_terminal


class VerdictStoreInterface(ABC):
    """Persistence boundary of the judge."""

    class StoreError(Exception):
        pass

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    @abstractmethod
    def find_submission(self, submission_id: int) -> Optional[Submission]:
        pass

    @abstractmethod
    def save_submission(self, submission: Submission) -> Submission:
        pass

    @abstractmethod
    def find_problem(self, problem_id: int) -> Optional[Problem]:
        pass

    @abstractmethod
    def save_problem(self, problem: Problem) -> Problem:
        pass

    @abstractmethod
    def find_contest(self, contest_id: int) -> Optional[Contest]:
        pass

    @abstractmethod
    def save_contest(self, contest: Contest) -> Contest:
        pass

    @abstractmethod
    def get_or_create_user(self, username: str) -> User:
        pass

    @abstractmethod
    def problems_for_contest(self, contest_id: int) -> list[Problem]:
        pass

    @abstractmethod
    def submissions_for_contest(self, contest_id: int) -> list[Submission]:
        pass

    @abstractmethod
    def count_contests(self) -> int:
        pass

    def get_submission(self, submission_id: int) -> Submission:
        submission = self.find_submission(submission_id)
        if submission is None:
            raise self.StoreError(f"Submission {submission_id} does not exist")
        return submission

    def get_problem(self, problem_id: int) -> Problem:
        problem = self.find_problem(problem_id)
        if problem is None:
            raise self.StoreError(f"Problem {problem_id} does not exist")
        return problem


class VerdictStore(VerdictStoreInterface):
    """
    In-memory store. Records are copied on save and on lookup, so callers only ever see
    what has been persisted.
    """

    def __init__(self, logger: logging.Logger, result_message_limit: int | None = None):
        super().__init__(logger)
        self.result_message_limit = result_message_limit
        self.submissions: dict[int, Submission] = {}
        self.problems: dict[int, Problem] = {}
        self.contests: dict[int, Contest] = {}
        self.users: dict[str, User] = {}
        self._submission_ids = itertools.count(1)
        self._problem_ids = itertools.count(1)
        self._contest_ids = itertools.count(1)
        self._user_ids = itertools.count(1)

    def find_submission(self, submission_id: int) -> Optional[Submission]:
        submission = self.submissions.get(submission_id)
        return deepcopy(submission) if submission is not None else None

    def save_submission(self, submission: Submission) -> Submission:
        if submission.id is None:
            submission.id = next(self._submission_ids)
        if (self.result_message_limit is not None and submission.result_message is not None
                and len(submission.result_message) > self.result_message_limit):
            submission.result_message = submission.result_message[:self.result_message_limit]
        self.submissions[submission.id] = deepcopy(submission)
        return deepcopy(submission)

    def find_problem(self, problem_id: int) -> Optional[Problem]:
        problem = self.problems.get(problem_id)
        return deepcopy(problem) if problem is not None else None

    def save_problem(self, problem: Problem) -> Problem:
        if problem.contest_id is not None and problem.contest_id not in self.contests:
            raise self.StoreError(f"Contest {problem.contest_id} does not exist")
        if problem.id is None:
            problem.id = next(self._problem_ids)
        self.problems[problem.id] = deepcopy(problem)
        return deepcopy(problem)

    def find_contest(self, contest_id: int) -> Optional[Contest]:
        contest = self.contests.get(contest_id)
        return deepcopy(contest) if contest is not None else None

    def save_contest(self, contest: Contest) -> Contest:
        if contest.id is None:
            contest.id = next(self._contest_ids)
        self.contests[contest.id] = deepcopy(contest)
        return deepcopy(contest)

    def get_or_create_user(self, username: str) -> User:
        if username not in self.users:
            self.users[username] = User(username=username, id=next(self._user_ids))
            self.logger.info("Created user '%s'", username)
        return deepcopy(self.users[username])

    def problems_for_contest(self, contest_id: int) -> list[Problem]:
        return [deepcopy(p) for p in self.problems.values() if p.contest_id == contest_id]

    def submissions_for_contest(self, contest_id: int) -> list[Submission]:
        return [deepcopy(s) for s in self.submissions.values() if s.contest_id == contest_id]

    def count_contests(self) -> int:
        return len(self.contests)
