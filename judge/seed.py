"""Loading of sample contests into an empty store."""
import logging
from pathlib import Path

import yaml

from .pipeline.store import Contest, Problem, TestCase, VerdictStoreInterface


class File:
    """Text kept in a separate file, referenced from seed YAML as ``!file <path>``."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def __repr__(self):
        return f'File({str(self.path)!r})'

    def read(self, base_dir: Path) -> str:
        path = self.path if self.path.is_absolute() else base_dir / self.path
        return path.read_text(encoding='utf-8')


def file_constructor(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> File:
    return File(loader.construct_scalar(node))


class SeedLoader(yaml.SafeLoader):
    pass


SeedLoader.add_constructor('!file', file_constructor)


def _text(value, base_dir: Path) -> str:
    if isinstance(value, File):
        return value.read(base_dir)
    return '' if value is None else str(value)


def load_seed(store: VerdictStoreInterface, path: Path, logger: logging.Logger) -> list[Contest]:
    """
    Saves the contests described in a YAML file, unless the store already has contests.

    Expected layout::

        contests:
          - name: Sample Contest
            problems:
              - title: Sum Two
                statement: Read two integers and print their sum
                test_cases:
                  - {input: "1 2", expected_output: "3"}
    """
    if store.count_contests() > 0:
        logger.info("Store already has contests, skipping seed file '%s'", path)
        return []

    with open(path, encoding='utf-8') as f:
        content = yaml.load(f, Loader=SeedLoader) or {}

    base_dir = Path(path).parent
    created = []
    for contest_data in content.get('contests', []):
        contest = store.save_contest(Contest(name=contest_data['name']))
        for problem_data in contest_data.get('problems', []):
            test_cases = [TestCase(input_data=_text(tc.get('input'), base_dir),
                                   expected_output=_text(tc.get('expected_output'), base_dir))
                          for tc in problem_data.get('test_cases', [])]
            store.save_problem(Problem(title=problem_data['title'],
                                       statement=_text(problem_data.get('statement'), base_dir),
                                       test_cases=test_cases,
                                       contest_id=contest.id))
        logger.info("Inserted contest '%s' with id=%s", contest.name, contest.id)
        created.append(contest)
    return created
