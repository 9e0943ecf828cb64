"""Module for communication with the remote code-execution service."""
import asyncio
import base64
import binascii
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta

import aiohttp


# One table for every caller; unknown and missing languages run as Java.
LANGUAGE_IDS: dict[str, int] = {
    'java': 62,
    'python': 71,
    'python3': 71,
    'cpp': 54,
    'c++': 54,
    'c': 50,
}
DEFAULT_LANGUAGE_ID = LANGUAGE_IDS['java']

NO_OUTPUT = 'No output'
COMPILATION_ERROR_PREFIX = 'Compilation Error:\n'
RUNTIME_ERROR_PREFIX = 'Runtime Error:\n'


def language_id(language: str | None) -> int:
    if language is None:
        return DEFAULT_LANGUAGE_ID
    return LANGUAGE_IDS.get(language.strip().lower(), DEFAULT_LANGUAGE_ID)


def encode(text: str | None) -> str:
    return base64.b64encode((text or '').encode('utf-8')).decode('ascii')


def decode(value: str | None) -> str:
    """
    Decodes a base64 field, returning it untouched when it is not valid base64 text.
    Line breaks inside the base64 text (MIME style wrapping) are ignored.
    """
    if not value:
        return ''
    if not isinstance(value, str):
        return str(value)
    try:
        return base64.b64decode(''.join(value.split()), validate=True).decode('utf-8')
    except (binascii.Error, ValueError):
        return value


@dataclass(frozen=True)
class ExecutionResult:
    stdout: str = ''
    stderr: str = ''
    compile_output: str = ''

    @property
    def compilation_failed(self) -> bool:
        return bool(self.compile_output)

    @property
    def text(self) -> str:
        if self.compile_output:
            return COMPILATION_ERROR_PREFIX + self.compile_output
        if self.stderr:
            return RUNTIME_ERROR_PREFIX + self.stderr
        return self.stdout.strip() if self.stdout else NO_OUTPUT


@dataclass(frozen=True)
class Success:
    result: ExecutionResult


@dataclass(frozen=True)
class Timeout:
    pass


@dataclass(frozen=True)
class ExecutionFailure:
    message: str


Outcome = Success | Timeout | ExecutionFailure


class ExecutionClientInterface(ABC):
    """Interface for the code-execution service."""

    @abstractmethod
    async def execute(self, source_code: str, language: str | None, stdin: str | None) -> Outcome:
        """Runs source code once against the given stdin."""
        pass


class Judge0Client(ExecutionClientInterface):
    """Client for a Judge0 compatible execution service, waiting synchronously for each run."""

    SUBMISSIONS_PATH = '/submissions'

    def __init__(self,
                 base_url: str,
                 timeout: timedelta,
                 logger: logging.Logger,
                 api_key: str | None = None,
                 api_host: str | None = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.logger = logger
        self.api_key = api_key
        self.api_host = api_host

    @property
    def submissions_url(self) -> str:
        return self.base_url + self.SUBMISSIONS_PATH

    @property
    def headers(self) -> dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if self.api_key:
            headers['X-RapidAPI-Key'] = self.api_key
        if self.api_host:
            headers['X-RapidAPI-Host'] = self.api_host
        return headers

    @staticmethod
    def make_payload(source_code: str, language: str | None, stdin: str | None) -> dict:
        return {
            'source_code': encode(source_code),
            'language_id': language_id(language),
            'stdin': encode(stdin),
        }

    async def execute(self, source_code: str, language: str | None, stdin: str | None) -> Outcome:
        payload = self.make_payload(source_code, language, stdin)
        start = datetime.now()
        try:
            body = await self._post(payload)
        except asyncio.TimeoutError:
            self.logger.warning("Execution service did not answer within %s", self.timeout)
            return Timeout()
        except (aiohttp.ClientError, ValueError) as e:
            message = str(e) or e.__class__.__name__
            self.logger.error("Execution service call failed: %s", message)
            return ExecutionFailure(message)
        self.logger.debug("Execution service call lasted %s", datetime.now() - start)
        return Success(self.parse_result(body))

    async def _post(self, payload: dict) -> dict:
        timeout = aiohttp.ClientTimeout(total=self.timeout.total_seconds())
        params = {'base64_encoded': 'true', 'wait': 'true'}
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(url=self.submissions_url,
                                    params=params,
                                    headers=self.headers,
                                    json=payload) as response:
                response.raise_for_status()
                raw = await response.text()

        if not raw.strip():
            raise ValueError('Empty response from execution service')
        body = json.loads(raw)
        if not isinstance(body, dict):
            raise ValueError(f'Malformed response from execution service: {raw[:200]}')
        return body

    @staticmethod
    def parse_result(body: dict) -> ExecutionResult:
        return ExecutionResult(
            stdout=decode(body.get('stdout')),
            stderr=decode(body.get('stderr')),
            compile_output=decode(body.get('compile_output')),
        )
