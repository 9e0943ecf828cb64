from collections import Counter

from .pipeline.store import SubmissionStatus, VerdictStoreInterface


def leaderboard(store: VerdictStoreInterface, contest_id: int) -> list[dict]:
    """Number of accepted submissions per user, best first."""
    scores = Counter(s.username for s in store.submissions_for_contest(contest_id)
                     if s.status == SubmissionStatus.ACCEPTED)
    board = [{'username': username, 'score': score} for username, score in scores.items()]
    board.sort(key=lambda row: (-row['score'], row['username']))
    return board
