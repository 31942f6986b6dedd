import logging
import re
import sys
from dataclasses import dataclass, field
from typing import List, Optional

# Worker / timeout bounds (configurable here)
DEFAULT_WORKERS = 300
MAX_WORKERS = 10000
DEFAULT_TIMEOUT = 3.0
MAX_TIMEOUT = 300.0
DNS_TIMEOUT = 2.0
PROGRESS_INTERVAL = 0.5
DEFAULT_OUTPUT = "results.txt"

# Idle connection pools of the shared HTTP session
POOL_CONNECTIONS = 100
POOL_MAXSIZE = 30

# Domains with fewer than three labels: generate nothing, or prepend the word once
SHORT_DOMAIN_SKIP = "skip"
SHORT_DOMAIN_PREPEND = "prepend"
SHORT_DOMAIN_POLICIES = (SHORT_DOMAIN_SKIP, SHORT_DOMAIN_PREPEND)

# What counts as a live host: any HTTP response, or only status < 400
ALIVE_ANY_RESPONSE = "any"
ALIVE_BELOW_400 = "below-400"
ALIVE_POLICIES = (ALIVE_ANY_RESPONSE, ALIVE_BELOW_400)

USER_AGENTS = [
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/138.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.5 Safari/605.1.15',
    'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/137.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:128.0) Gecko/20100101 Firefox/128.0',
]

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

_DURATION_PART = re.compile(r'(\d+(?:\.\d+)?)(ms|s|m|h)')
_DURATION_UNITS = {'ms': 0.001, 's': 1.0, 'm': 60.0, 'h': 3600.0}


class ConfigError(ValueError):
    """Raised for invalid run configuration, before any pipeline work starts."""


def parse_duration(value):
    """
    Parses a duration such as '3s', '500ms', '1m30s' or a bare number of seconds.
    Returns the duration in seconds as a float.
    """
    text = str(value).strip().lower()
    if not text:
        raise ConfigError("Empty duration")
    try:
        return float(text)
    except ValueError:
        pass

    pos = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(text):
        raise ConfigError(f"Invalid duration '{value}'. Use formats like '5s', '500ms', '1m30s'.")
    return total


@dataclass
class RunConfig:
    workers: int = DEFAULT_WORKERS
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False
    dns_timeout: float = DNS_TIMEOUT
    nameservers: List[str] = field(default_factory=list)
    alive_policy: str = ALIVE_ANY_RESPONSE
    short_domain_policy: str = SHORT_DOMAIN_SKIP
    show_progress: bool = True

    def validate(self):
        if isinstance(self.workers, bool) or not isinstance(self.workers, int):
            raise ConfigError(f"Worker count must be an integer, got {self.workers!r}")
        if not 1 <= self.workers <= MAX_WORKERS:
            raise ConfigError(f"Worker count must be between 1 and {MAX_WORKERS}, got {self.workers}")
        if not 0 < self.timeout <= MAX_TIMEOUT:
            raise ConfigError(f"Timeout must be greater than 0 and at most {MAX_TIMEOUT:g}s, got {self.timeout}")
        if self.dns_timeout <= 0:
            raise ConfigError(f"DNS timeout must be positive, got {self.dns_timeout}")
        if self.alive_policy not in ALIVE_POLICIES:
            raise ConfigError(f"Unknown alive policy '{self.alive_policy}'")
        if self.short_domain_policy not in SHORT_DOMAIN_POLICIES:
            raise ConfigError(f"Unknown short domain policy '{self.short_domain_policy}'")
        return self


def setup_logging(verbose=False, log_file: Optional[str] = None):
    """Configures the 'subsplice' logger hierarchy and returns its root logger."""
    logger = logging.getLogger("subsplice")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def require_inputs(words, domains, wordlist_path=None):
    """Raises ConfigError when there is nothing to splice."""
    if not words:
        source = f"Wordlist {wordlist_path}" if wordlist_path else "Wordlist"
        raise ConfigError(f"{source} has no usable entries")
    if not domains:
        raise ConfigError("No usable target domains")
