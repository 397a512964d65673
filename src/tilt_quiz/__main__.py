import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .configs import AppSettings
from .errors import TiltQuizError
from .factories import create_game_manager
from .feedback import ConsoleView, TiltIndicator
from .models import SessionResult

logger = logging.getLogger("tilt_quiz")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tilt-quiz",
        description="Answer quiz questions by tilting your head left or right.",
    )
    parser.add_argument(
        "--dummy",
        action="store_true",
        help="Use a simulated camera that tilts left and right on its own instead of the webcam.",
    )
    parser.add_argument("--questions", type=Path, help="JSON question bank to use instead of the bundled one.")
    parser.add_argument("--limit", type=int, help="Ask at most this many questions.")
    parser.add_argument("--no-shuffle", action="store_true", help="Keep the question bank order.")
    parser.add_argument(
        "--unit",
        action="append",
        metavar="UNIT",
        help="Only ask questions from this unit (id or name). Can be repeated.",
    )
    return parser.parse_args(argv)


def apply_overrides(settings: AppSettings, args: argparse.Namespace) -> AppSettings:
    if args.dummy:
        settings.use_dummy_mode = True
    if args.questions:
        settings.game.questions_path = args.questions
    if args.limit is not None:
        settings.game.question_limit = args.limit if args.limit > 0 else None
    if args.no_shuffle:
        settings.game.shuffle = False
    return settings


async def run_game(settings: AppSettings, unit_keys: Optional[Sequence[str]] = None) -> SessionResult:
    manager = create_game_manager(settings, view=ConsoleView(), sample_sink=TiltIndicator())

    unit_ids = None
    if unit_keys:
        unit_ids = []
        for key in unit_keys:
            unit = manager.bank.find_unit(key)
            if unit is None:
                raise TiltQuizError(f"Unknown unit '{key}'.")
            unit_ids.append(unit.id)

    loop = asyncio.get_running_loop()
    main_task = asyncio.current_task()
    end_tasks: set[asyncio.Task] = set()

    def _request_end() -> None:
        logger.info("End of game requested.")
        if not manager.is_playing:
            main_task.cancel()
            return
        task = loop.create_task(manager.end_game())
        end_tasks.add(task)
        task.add_done_callback(end_tasks.discard)

    handles_sigint = True
    try:
        loop.add_signal_handler(signal.SIGINT, _request_end)
    except NotImplementedError:
        # Windows event loops. Ctrl+C then aborts without a result.
        handles_sigint = False

    try:
        await manager.start_game(unit_ids=unit_ids)
        return await manager.wait_finished()
    finally:
        if handles_sigint:
            loop.remove_signal_handler(signal.SIGINT)
        await manager.shutdown()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    # 1. Load Configuration
    try:
        settings = apply_overrides(AppSettings(), args)
    except Exception as e:
        print(f"Configuration Error: {e}")
        return 1

    # 2. Setup Logging
    logging.basicConfig(
        level=settings.logging.level,
        format=settings.logging.format,
        datefmt=settings.logging.datefmt,
        stream=sys.stdout
    )
    logger.info(f"Starting Tilt Quiz v{__version__}")
    if settings.use_dummy_mode:
        logger.warning("Running with the DUMMY camera (simulation mode)")

    # 3. Play one game
    try:
        asyncio.run(run_game(settings, args.unit))
        return 0
    except TiltQuizError as e:
        logger.error("%s", e)
        return 1
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.warning("Interrupted.")
        return 130
    except Exception:
        logger.exception("Fatal Application Error")
        return 1
    finally:
        logger.info("Tilt Quiz has shut down.")


if __name__ == "__main__":
    sys.exit(main())
