import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Mapping, Optional

from .durations import SECOND, ZERO

logger = logging.getLogger(__name__)

LOG_FILE_ENV = "TERMTIMER_LOG_FILE"
LOG_LEVEL_ENV = "TERMTIMER_LOG_LEVEL"
TICK_ENV = "TERMTIMER_TICK_SECONDS"


@dataclass(frozen=True)
class Settings:
    log_file: Optional[Path] = None
    log_level: str = "INFO"
    tick: timedelta = SECOND


def _parse_tick(raw: Optional[str]) -> timedelta:
    if not raw:
        return SECOND
    try:
        tick = timedelta(seconds=float(raw))
    except (ValueError, OverflowError):
        logger.warning("Ignoring %s=%r: not a usable number of seconds", TICK_ENV, raw)
        return SECOND
    if tick <= ZERO:
        logger.warning("Ignoring %s=%r: must be a positive number", TICK_ENV, raw)
        return SECOND
    return tick


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    log_file = env.get(LOG_FILE_ENV)
    return Settings(
        log_file=Path(log_file) if log_file else None,
        log_level=env.get(LOG_LEVEL_ENV, "INFO").upper(),
        tick=_parse_tick(env.get(TICK_ENV)),
    )


def setup_logging(settings: Settings) -> None:
    """Log to a file when one is configured.

    The timer owns the screen while it runs, so there is no console handler.
    """
    if settings.log_file is None:
        logging.getLogger("termtimer").addHandler(logging.NullHandler())
        return
    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(settings.log_file, mode="a", encoding="utf-8"),
        ],
    )
    logger.info("termtimer logging to %s", settings.log_file)
