import argparse
import logging
import sys

from . import __version__
from .config import load_settings, setup_logging
from .durations import parse_duration
from .errors import SystemFault, UserError, render_error
from .screen import CursesRenderer, LineRenderer
from .session import TimerSession
from .sources import CursesEventSource, SleepEventSource
from .timer import run_timer

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_SYSTEM_ERROR = 1
EXIT_USAGE = 2


def parse_args(argv=None):
    epilog = (
        "Controls (interactive): space or p pause/resume, q or Esc quit, "
        "Ctrl+C stop. Duration examples: 90, 1:30, 1:0:0, 2:0:0:0, 5.250"
    )
    parser = argparse.ArgumentParser(
        prog="termtimer",
        description="Full-screen terminal countdown timer",
        epilog=epilog,
    )
    parser.add_argument("duration", help="duration in [[[d:]h:]m:]s[.ms] format")
    parser.add_argument("--plain", action="store_true", help="count down on a single line without the full-screen view")
    parser.add_argument("--version", action="version", version=f"termtimer {__version__}")
    return parser.parse_args(argv)


def _run_interactive(session: TimerSession) -> TimerSession:
    renderer = CursesRenderer()
    return run_timer(session, renderer, CursesEventSource(renderer))


def _run_plain(session: TimerSession) -> TimerSession:
    return run_timer(session, LineRenderer(), SleepEventSource())


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = load_settings()
    setup_logging(settings)

    try:
        duration = parse_duration(args.duration)
    except UserError as err:
        logger.info("Rejected duration %r: %s", args.duration, err)
        print(render_error(err), file=sys.stderr)
        return EXIT_USAGE

    session = TimerSession(duration, tick=settings.tick)
    try:
        if args.plain:
            _run_plain(session)
        else:
            _run_interactive(session)
    except KeyboardInterrupt:
        session.stop()
    except SystemFault as err:
        logger.exception("Timer aborted")
        print(render_error(err), file=sys.stderr)
        return EXIT_SYSTEM_ERROR

    try:
        print(session.summary())
    except KeyboardInterrupt:
        return EXIT_OK
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
