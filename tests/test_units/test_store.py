import os
import unittest
from pathlib import Path

from judge.logger import LoggerManager
from judge.pipeline.store import (Contest, Problem, StateError, Submission, SubmissionStatus, TestCase,
                                  VerdictStore, VerdictStoreInterface)


class StoreTest(unittest.TestCase):

    test_dir = Path(__file__).parent.parent

    def setUp(self):
        self.logger_manager = LoggerManager('test', self.test_dir / 'test_store.log', 0)
        self.logger_manager.set_formatter('%(filename)s:%(lineno)d: %(message)s')
        self.logger_manager.start()
        self.logger = self.logger_manager.logger
        self.store = VerdictStore(self.logger, result_message_limit=20)
        self.contest = self.store.save_contest(Contest(name='Sample Contest'))
        self.problem = self.store.save_problem(Problem(title='Sum Two',
                                                       test_cases=[TestCase('1 2', '3')],
                                                       contest_id=self.contest.id))

    def tearDown(self):
        self.logger_manager.stop()
        os.remove(self.test_dir / 'test_store.log')

    def new_submission(self, username: str = 'alice') -> Submission:
        return Submission(contest_id=self.contest.id,
                          problem_id=self.problem.id,
                          code='print(3)',
                          language='python',
                          username=username)

    def test_save_assigns_identity(self):
        first = self.store.save_submission(self.new_submission())
        second = self.store.save_submission(self.new_submission())
        self.assertIsNotNone(first.id)
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(first.id, self.store.save_submission(first).id)

    def test_reader_sees_only_saved_state(self):
        saved = self.store.save_submission(self.new_submission())
        saved.change_state(SubmissionStatus.RUNNING, requires=SubmissionStatus.PENDING)
        self.assertEqual(self.store.find_submission(saved.id).status, SubmissionStatus.PENDING)
        self.store.save_submission(saved)
        self.assertEqual(self.store.find_submission(saved.id).status, SubmissionStatus.RUNNING)

    def test_find_missing(self):
        self.assertIsNone(self.store.find_submission(404))
        self.assertIsNone(self.store.find_problem(404))
        self.assertIsNone(self.store.find_contest(404))
        with self.assertRaises(VerdictStoreInterface.StoreError):
            self.store.get_submission(404)
        with self.assertRaises(self.store.StoreError):
            self.store.get_problem(404)

    def test_problem_requires_existing_contest(self):
        with self.assertRaises(self.store.StoreError):
            self.store.save_problem(Problem(title='Orphan', contest_id=404))

    def test_result_message_is_bounded(self):
        submission = self.new_submission()
        submission.result_message = 'x' * 50
        saved = self.store.save_submission(submission)
        self.assertEqual(len(saved.result_message), 20)
        self.assertEqual(len(self.store.find_submission(saved.id).result_message), 20)

    def test_get_or_create_user(self):
        user = self.store.get_or_create_user('alice')
        self.assertEqual(user.id, self.store.get_or_create_user('alice').id)
        self.assertNotEqual(user.id, self.store.get_or_create_user('bob').id)

    def test_contest_queries(self):
        other = self.store.save_contest(Contest(name='Other'))
        self.store.save_problem(Problem(title='Echo', contest_id=other.id))
        self.store.save_submission(self.new_submission())
        self.assertEqual([p.title for p in self.store.problems_for_contest(self.contest.id)], ['Sum Two'])
        self.assertEqual(len(self.store.submissions_for_contest(self.contest.id)), 1)
        self.assertEqual(len(self.store.submissions_for_contest(other.id)), 0)
        self.assertEqual(self.store.count_contests(), 2)


class SubmissionStateTest(unittest.TestCase):

    def setUp(self):
        self.submission = Submission(contest_id=1, problem_id=1, code='x', language=None, username='alice')

    def test_initial_state(self):
        self.assertEqual(self.submission.status, SubmissionStatus.PENDING)
        self.assertIsNone(self.submission.finished_at)
        self.assertFalse(self.submission.is_finished)

    def test_forward_path(self):
        self.submission.change_state(SubmissionStatus.RUNNING, requires=SubmissionStatus.PENDING)
        self.assertIsNone(self.submission.finished_at)
        self.submission.change_state(SubmissionStatus.ACCEPTED, requires=SubmissionStatus.RUNNING)
        self.assertTrue(self.submission.is_finished)
        self.assertIsNotNone(self.submission.finished_at)

    def test_terminal_requires_running(self):
        with self.assertRaises(StateError):
            self.submission.change_state(SubmissionStatus.ACCEPTED, requires=SubmissionStatus.RUNNING)
        self.assertEqual(self.submission.status, SubmissionStatus.PENDING)

    def test_no_backward_transition(self):
        self.submission.change_state(SubmissionStatus.RUNNING, requires=None)
        with self.assertRaises(StateError):
            self.submission.change_state(SubmissionStatus.PENDING, requires=None)
        self.submission.change_state(SubmissionStatus.WRONG_ANSWER, requires=None)
        for state in SubmissionStatus:
            with self.assertRaises(StateError):
                self.submission.change_state(state, requires=None)
        self.assertEqual(self.submission.status, SubmissionStatus.WRONG_ANSWER)

    def test_requires_list(self):
        self.submission.change_state(SubmissionStatus.RUNNING,
                                     requires=[SubmissionStatus.PENDING, SubmissionStatus.RUNNING])
        self.assertEqual(self.submission.status, SubmissionStatus.RUNNING)

    def test_terminal_states(self):
        terminal = {s for s in SubmissionStatus if s.is_terminal}
        self.assertEqual(terminal, {SubmissionStatus.ACCEPTED,
                                    SubmissionStatus.WRONG_ANSWER,
                                    SubmissionStatus.COMPILATION_ERROR,
                                    SubmissionStatus.TIMED_OUT,
                                    SubmissionStatus.ERROR})


if __name__ == '__main__':
    unittest.main()
