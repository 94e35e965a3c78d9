import os
import sys
import logging

from .errors import ConfigurationError

USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/95.0.4638.69 Safari/537.36'

DEFAULT_TIMEOUT = 10
DEFAULT_WORKERS = 10
DEFAULT_MODE = 'both'

# Logs go to stderr, stdout is reserved for results
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stderr)]
)
logger = logging.getLogger('sankgrap')


def _number_from_env(name, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a {cast.__name__}, got {raw!r}")


# Flags win; env vars are only read for settings the caller left as None
def load_settings(workers=None, timeout=None, user_agent=None):
    return {
        'workers': workers if workers is not None else _number_from_env('SANKGRAP_WORKERS', DEFAULT_WORKERS, int),
        'timeout': timeout if timeout is not None else _number_from_env('SANKGRAP_TIMEOUT', DEFAULT_TIMEOUT, float),
        'user_agent': user_agent or os.getenv('SANKGRAP_USER_AGENT', '') or USER_AGENT,
    }
