"""Run one Pomodoro session headless: python -m pomoflow."""

import argparse
import os
import logging
import sys

from PyQt6.QtCore import QCoreApplication

from .database.db import init_db
from .errors import InvalidSettingsError
from .pomodoro import Pomodoro
from .settings import SettingsStore
from .stats import summarize
from .timer.display import format_time
from .timer.driver import TickDriver, TICK_INTERVAL_MS
from .timer.events import SessionCompleted, SessionInterrupted

logger = logging.getLogger("pomoflow")


def _parse_args(argv):
    parser = argparse.ArgumentParser(prog="pomoflow", description=__doc__)
    parser.add_argument("--user", default=os.environ.get("USER", "local"))
    parser.add_argument("--task", default=None, help="task id to attach")
    parser.add_argument("--work", type=int, default=None,
                        help="work duration in minutes (saved)")
    parser.add_argument("--history", action="store_true",
                        help="print recent sessions and exit")
    parser.add_argument("--interval-ms", type=int, default=TICK_INTERVAL_MS,
                        help=argparse.SUPPRESS)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def _print_history(pomodoro: Pomodoro) -> int:
    sessions = pomodoro.fetch_sessions()
    if pomodoro.history_error:
        print("Session history is unavailable right now.")
        return 1
    if not sessions:
        print("No sessions yet. Start your first Pomodoro!")
        return 0
    for s in sessions:
        status = "done" if s.completed else "stopped"
        print(
            f"{s.start_time:%b %d %H:%M}  {s.session_type:<12} "
            f"{s.duration_minutes:>3}m  {status}"
        )
    summary = summarize(sessions)
    print(
        f"\n{summary.completed_work} pomodoros, {summary.focus_minutes} focus "
        f"minutes, {summary.completion_rate:.0f}% completed"
    )
    return 0


def main(argv=None) -> None:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db()

    pomodoro = Pomodoro(args.user, settings_store=SettingsStore(persist=True))
    if args.history:
        sys.exit(_print_history(pomodoro))
    if args.work is not None:
        try:
            pomodoro.update_settings(work_duration=args.work)
        except InvalidSettingsError as exc:
            sys.exit(f"pomoflow: {exc}")

    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName("Pomoflow")

    driver = TickDriver(pomodoro.engine, interval_ms=args.interval_ms)
    pomodoro.attach_driver(driver)
    driver.ticked.connect(
        lambda remaining: print(f"\r{format_time(remaining)}", end="", flush=True)
    )

    def _on_event(event) -> None:
        if isinstance(event, (SessionCompleted, SessionInterrupted)):
            print()
            logger.info("%s finished (%s)", event.session_type.label, event.name)
            app.quit()

    driver.event_emitted.connect(_on_event)

    pomodoro.start(args.task)
    logger.info(
        "%s: %s", pomodoro.session_type.label, pomodoro.formatted_time
    )
    try:
        code = app.exec()
    except KeyboardInterrupt:
        code = 0
    if pomodoro.is_running or pomodoro.is_paused:
        pomodoro.stop()
    driver.shutdown()
    sys.exit(code)


if __name__ == "__main__":
    main()
