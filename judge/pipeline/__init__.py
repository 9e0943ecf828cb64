from .comparator import ResultComparator
from .execution import ExecutionClientInterface, Judge0Client, ExecutionResult, Success, Timeout, ExecutionFailure
from .runner import SubmissionRunner
from .scheduler import JudgeScheduler
from .store import VerdictStoreInterface, VerdictStore, Submission, SubmissionStatus, Problem, TestCase, Contest

__all__ = [
    'ResultComparator',
    'ExecutionClientInterface',
    'Judge0Client',
    'ExecutionResult',
    'Success',
    'Timeout',
    'ExecutionFailure',
    'SubmissionRunner',
    'JudgeScheduler',
    'VerdictStoreInterface',
    'VerdictStore',
    'Submission',
    'SubmissionStatus',
    'Problem',
    'TestCase',
    'Contest',
]
