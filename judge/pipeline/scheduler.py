"""Fixed-size pool of judging workers."""
import asyncio
import logging

from .runner import SubmissionRunner


class JudgeScheduler:
    """
    Hands submission ids to a fixed number of worker tasks. Each worker judges one submission
    from start to verdict before taking the next, so at most ``worker_count`` submissions are
    judged at once. Queued ids are picked up in no guaranteed order across workers.
    """

    def __init__(self, runner: SubmissionRunner, worker_count: int, logger: logging.Logger):
        if worker_count < 1:
            raise ValueError(f"Worker count must be positive, got {worker_count}")
        self.runner = runner
        self.worker_count = worker_count
        self.logger = logger
        self.queue: asyncio.Queue | None = None
        self.workers: dict[int, asyncio.Task] = {}
        self.busy: set[int] = set()
        self.stopping = False

    @property
    def running(self) -> bool:
        return bool(self.workers) and not self.stopping

    def start(self):
        """Starts the workers on the running event loop."""
        if self.workers:
            raise RuntimeError("Scheduler already started")
        self.queue = asyncio.Queue()
        self.stopping = False
        for number in range(self.worker_count):
            self.workers[number] = asyncio.create_task(self._worker(number), name=f'judge-worker-{number}')
        self.logger.info("Judge scheduler started with %s workers", self.worker_count)

    def enqueue(self, submission_id: int):
        """Queues a submission for judging and returns at once."""
        if not self.running:
            raise RuntimeError("Scheduler is not running")
        self.queue.put_nowait(submission_id)
        self.logger.debug("Submission '%s' queued (%s waiting)", submission_id, self.queue.qsize())

    async def join(self):
        """Waits until every queued submission has been judged."""
        if self.queue is not None:
            await self.queue.join()

    async def stop(self, grace: float | None = None):
        """
        Stops the workers. Idle workers are cancelled at once, while workers in the middle of
        a run finish it first. Submissions still waiting in the queue stay PENDING.

        :param grace: seconds to wait for runs in progress; runs still going after that are
            cancelled and their submissions finished as ERROR. ``None`` waits for them all.
        """
        self.stopping = True
        for number, task in self.workers.items():
            if number not in self.busy:
                task.cancel()
        tasks = list(self.workers.values())
        if tasks:
            _, pending = await asyncio.wait(tasks, timeout=grace)
            for task in pending:
                self.logger.warning("Cancelling %s after %ss grace", task.get_name(), grace)
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
        self.workers.clear()
        self.busy.clear()
        if self.queue is not None and not self.queue.empty():
            self.logger.warning("Judge scheduler stopped with %s submissions left PENDING", self.queue.qsize())
        self.logger.info("Judge scheduler stopped")

    async def _worker(self, number: int):
        while not self.stopping:
            submission_id = await self.queue.get()
            self.busy.add(number)
            try:
                self.logger.debug("Worker %s took submission '%s'", number, submission_id)
                await self.runner.run(submission_id)
            except asyncio.CancelledError:
                self.logger.warning("Judging of submission '%s' was cancelled", submission_id)
                await self._trash(submission_id, RuntimeError("judging cancelled"))
                raise
            except Exception as e:
                self.logger.error("Error while judging submission '%s': %s",
                                  submission_id, str(e), exc_info=True)
                await self._trash(submission_id, e)
            finally:
                self.busy.discard(number)
                self.queue.task_done()

    async def _trash(self, submission_id: int, error: Exception):
        try:
            await self.runner.trash(submission_id, error)
        except Exception as e:
            self.logger.error("Could not trash submission '%s': %s", submission_id, str(e))
