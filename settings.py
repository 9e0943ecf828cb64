"""Settings for judge"""
import os
from pathlib import Path
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

# Server settings
SERVER_HOST: str = os.getenv('SERVER_HOST', '127.0.0.1')
SERVER_PORT: int = int(os.getenv('SERVER_PORT', '8080'))

# Path settings
BASE_DIR = Path(__file__).resolve().parent
PACKAGE_DIR = BASE_DIR / 'judge'

_seed_file_in = os.getenv('SEED_FILE')
if _seed_file_in is not None:
    SEED_FILE = Path(_seed_file_in) if _seed_file_in else None
else:
    SEED_FILE = PACKAGE_DIR / 'resources' / 'sample_contest.yaml'

# Execution service settings (Judge0 compatible API)
EXECUTION_SERVICE_URL: str = os.getenv('EXECUTION_SERVICE_URL', 'https://ce.judge0.com')
# Only needed when the service is reached through RapidAPI
EXECUTION_API_KEY: str | None = os.getenv('EXECUTION_API_KEY')
EXECUTION_API_HOST: str | None = os.getenv('EXECUTION_API_HOST')

# Timeout settings
EXECUTION_TIMEOUT: timedelta = timedelta(seconds=float(os.getenv('EXECUTION_TIMEOUT_SECONDS', '15')))

# Judge settings
JUDGE_WORKERS: int = int(os.getenv('JUDGE_WORKERS', '4'))

# Submission limits
CODE_SIZE_LIMIT = 100000
RESULT_MESSAGE_LIMIT = 2000

# Logging settings
_log_dir_in = os.getenv('LOG_DIR')
if _log_dir_in is not None:
    LOG_DIR = Path(_log_dir_in)
else:
    LOG_DIR = BASE_DIR / 'logs'
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_FILE = LOG_DIR / 'judge.log'
LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')
LOGGER_PROMPT = '%(asctime)s %(name)s:%(filename)s:%(lineno)d: %(message)s'
