"""Runtime settings read from the environment."""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

ENV_PREFIX = "CFSUBMIT_"


@dataclass(frozen=True)
class Settings:
    """Settings for the HTTP client, submission flow and poller."""

    base_url: str = "https://codeforces.com"
    user_agent: Optional[str] = None
    request_timeout: float = 30.0
    max_attempts: int = 3
    api_min_interval: float = 2.0
    submit_min_interval: float = 1.2
    poll_initial_delay: float = 1.0
    poll_interval: float = 2.0
    poll_max_attempts: int = 30
    poll_budget: float = 60.0
    state_dir: Path = Path.home() / ".cfsubmit"
    use_ephemeral: bool = False
    log_level: str = "INFO"

    @property
    def state_file(self) -> Path:
        return self.state_dir / "state.json"

    @property
    def cookie_file(self) -> Path:
        return self.state_dir / "cookies.json"


def _env(name: str) -> Optional[str]:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    return value if value not in (None, "") else None


def _env_bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Build settings from ``CFSUBMIT_*`` variables, after loading a .env file."""
    load_dotenv(dotenv_path=env_file)
    defaults = Settings()

    return Settings(
        base_url=_env("BASE_URL") or defaults.base_url,
        user_agent=_env("USER_AGENT"),
        request_timeout=float(_env("REQUEST_TIMEOUT") or defaults.request_timeout),
        max_attempts=int(_env("MAX_ATTEMPTS") or defaults.max_attempts),
        api_min_interval=float(_env("API_MIN_INTERVAL") or defaults.api_min_interval),
        submit_min_interval=float(_env("SUBMIT_MIN_INTERVAL") or defaults.submit_min_interval),
        poll_initial_delay=float(_env("POLL_INITIAL_DELAY") or defaults.poll_initial_delay),
        poll_interval=float(_env("POLL_INTERVAL") or defaults.poll_interval),
        poll_max_attempts=int(_env("POLL_MAX_ATTEMPTS") or defaults.poll_max_attempts),
        poll_budget=float(_env("POLL_BUDGET") or defaults.poll_budget),
        state_dir=Path(_env("STATE_DIR") or defaults.state_dir).expanduser(),
        use_ephemeral=_env_bool("USE_EPHEMERAL", defaults.use_ephemeral),
        log_level=(_env("LOG_LEVEL") or defaults.log_level).upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)
