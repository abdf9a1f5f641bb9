# novadefense/__main__.py
"""Entry point: python -m novadefense

Plays one headless session with the autopilot on a synthetic clock and
appends the result to the leaderboard.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .agents.autopilot import AutopilotPolicy
from .config import Difficulty, GameConfig
from .game import GameLoop
from .leaderboard import Leaderboard, LeaderboardEntry
from .settings import settings

logger = logging.getLogger("novadefense")


def run_session(
    difficulty: Difficulty,
    *,
    seed: int | None,
    fps: float,
    max_seconds: float,
    policy: AutopilotPolicy | None = None,
) -> GameLoop:
    """Drive a GameLoop to a terminal outcome (or the time cap) with a fixed frame step."""
    if fps <= 0.0:
        raise ValueError(f"fps must be positive, got {fps}")
    policy = policy or AutopilotPolicy()
    now = 0.0
    loop = GameLoop(GameConfig(seed=seed), clock=lambda: now)
    loop.start(difficulty)
    policy.reset()
    frame_dt = 1.0 / fps
    while loop.running and now < max_seconds:
        for x, y in policy.act(loop.sim, frame_dt):
            loop.pointer(x, y)
        now += frame_dt
        loop.frame(now)
    if loop.running:
        logger.warning(f"Time cap of {max_seconds:.0f}s reached before the session ended")
        loop.stop()
    return loop


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Nova Defense headless session")
    parser.add_argument(
        "--difficulty",
        default=settings.DIFFICULTY,
        choices=[d.value for d in Difficulty],
        type=str.upper,
    )
    parser.add_argument("--seed", type=int, default=settings.SEED)
    parser.add_argument("--fps", type=float, default=settings.FPS)
    parser.add_argument("--max-seconds", type=float, default=settings.MAX_SECONDS)
    parser.add_argument("--leaderboard", type=Path, default=settings.LEADERBOARD_PATH)
    parser.add_argument("--no-save", action="store_true", help="Do not record the session")
    parser.add_argument("--show-leaderboard", action="store_true", help="Print the top entries and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    board = Leaderboard(args.leaderboard)
    if args.show_leaderboard:
        for i, entry in enumerate(board.top(10), start=1):
            print(f"{i:2d}. {entry.rating}  {entry.score:5d}  {entry.difficulty:<8s}")
        return 0

    difficulty = Difficulty.parse(args.difficulty)
    loop = run_session(difficulty, seed=args.seed, fps=args.fps, max_seconds=args.max_seconds)
    outcome = loop.outcome
    if outcome is None:
        logger.info(f"No outcome; final score {loop.sim.score()}")
        return 1

    entry = LeaderboardEntry.from_outcome(difficulty.value, outcome.score, outcome.intact, outcome.won)
    logger.info(
        f"{'Victory' if outcome.won else 'Defeat'} on {difficulty.value}: "
        f"score={outcome.score} intact={outcome.intact} rating={entry.rating}"
    )
    if not args.no_save:
        board.add(entry)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
