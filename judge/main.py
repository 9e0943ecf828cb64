from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
import settings

from .intake import IntakeError, JudgeUnavailableError, SubmissionIntake
from .leaderboard import leaderboard
from .logger import LoggerManager
from .pipeline import (ExecutionClientInterface, Judge0Client, JudgeScheduler, ResultComparator,
                       SubmissionRunner, VerdictStore, VerdictStoreInterface)
from .pipeline.store import Problem, Submission, SubmissionStatus
from .seed import load_seed


# MODELS ================================================================================

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubmissionRequest(CamelModel):
    """Content of a new submission request"""
    contest_id: Optional[int] = None
    problem_id: Optional[int] = None
    username: Optional[str] = None
    code: Optional[str] = None
    language: Optional[str] = None


class SubmissionView(CamelModel):
    id: int
    contest_id: int
    problem_id: int
    username: str
    language: Optional[str]
    code: str
    status: SubmissionStatus
    result_message: Optional[str]
    created_at: datetime
    finished_at: Optional[datetime]

    @classmethod
    def of(cls, submission: Submission) -> 'SubmissionView':
        return cls(id=submission.id,
                   contest_id=submission.contest_id,
                   problem_id=submission.problem_id,
                   username=submission.username,
                   language=submission.language,
                   code=submission.code,
                   status=submission.status,
                   result_message=submission.result_message,
                   created_at=submission.created_at,
                   finished_at=submission.finished_at)


class TestCaseView(CamelModel):
    input_data: str
    expected_output: str


class ProblemView(CamelModel):
    id: int
    title: str
    statement: str
    test_cases: list[TestCaseView]

    @classmethod
    def of(cls, problem: Problem) -> 'ProblemView':
        return cls(id=problem.id,
                   title=problem.title,
                   statement=problem.statement,
                   test_cases=[TestCaseView(input_data=tc.input_data, expected_output=tc.expected_output)
                               for tc in problem.test_cases])


class ContestView(CamelModel):
    id: int
    name: str
    problems: list[ProblemView]


class LeaderboardRow(CamelModel):
    username: str
    score: int


# APP ===================================================================================

def build_app(logger_manager: LoggerManager,
              store: VerdictStoreInterface,
              execution_client: ExecutionClientInterface,
              seed_file: Path | None = None,
              worker_count: int = settings.JUDGE_WORKERS) -> FastAPI:
    """Wires the judging pipeline together and exposes it over HTTP."""
    logger = logger_manager.logger
    runner = SubmissionRunner(store, execution_client, ResultComparator(), logger)
    scheduler = JudgeScheduler(runner, worker_count, logger)
    intake = SubmissionIntake(store, scheduler, settings.CODE_SIZE_LIMIT, logger)

    @asynccontextmanager
    async def lifespan(app_: FastAPI):
        if seed_file is not None:
            load_seed(store, seed_file, logger)
        scheduler.start()

        yield

        await scheduler.stop()
        logger_manager.stop()

    app = FastAPI(title='shodh-judge', lifespan=lifespan)
    app.state.store = store
    app.state.scheduler = scheduler

    # VIEWS =================================================================================

    @app.get("/")
    async def root():
        return {"message": "Judge is running"}

    @app.post("/api/submissions")
    async def create_submission(content: SubmissionRequest) -> int:
        """Store a submission and queue it for judging"""
        try:
            submission = intake.submit(content.contest_id,
                                       content.problem_id,
                                       content.username,
                                       content.code,
                                       content.language)
        except IntakeError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except JudgeUnavailableError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return submission.id

    @app.get("/api/submissions/{submission_id}")
    async def get_submission(submission_id: int) -> SubmissionView:
        submission = store.find_submission(submission_id)
        if submission is None:
            raise HTTPException(status_code=404, detail="Submission not found")
        return SubmissionView.of(submission)

    @app.get("/api/contests/{contest_id}")
    async def get_contest(contest_id: int) -> ContestView:
        contest = store.find_contest(contest_id)
        if contest is None:
            raise HTTPException(status_code=404, detail="Contest not found")
        return ContestView(id=contest.id,
                           name=contest.name,
                           problems=[ProblemView.of(p) for p in store.problems_for_contest(contest_id)])

    @app.get("/api/contests/{contest_id}/leaderboard")
    async def get_leaderboard(contest_id: int) -> list[LeaderboardRow]:
        return [LeaderboardRow(**row) for row in leaderboard(store, contest_id)]

    return app


def create_app() -> FastAPI:
    """Builds the app from settings."""
    logger_manager = LoggerManager('judge', settings.LOG_FILE, settings.LOG_LEVEL, console=True)
    logger_manager.set_formatter(settings.LOGGER_PROMPT)
    logger_manager.start()
    logger = logger_manager.logger

    store = VerdictStore(logger, result_message_limit=settings.RESULT_MESSAGE_LIMIT)
    execution_client = Judge0Client(base_url=settings.EXECUTION_SERVICE_URL,
                                    timeout=settings.EXECUTION_TIMEOUT,
                                    logger=logger,
                                    api_key=settings.EXECUTION_API_KEY,
                                    api_host=settings.EXECUTION_API_HOST)
    return build_app(logger_manager, store, execution_client, seed_file=settings.SEED_FILE)
