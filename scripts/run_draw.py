"""Run draws from the command line against the persisted state.

Examples::

    python scripts/run_draw.py --mode single --count 3
    python scripts/run_draw.py --mode interactive --viz race --seed 7
    python scripts/run_draw.py --names "Ann,Ben,Cy,Dee,Eve" --mode groups --groups 2
"""

from __future__ import annotations

import argparse
import logging
import os
import random
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from drawlots import (  # noqa: E402
    DrawError,
    DrawMode,
    DrawOrchestrator,
    ListKind,
    StateStore,
    Visualization,
)
from drawlots.simulators import ManualScheduler  # noqa: E402

logger = logging.getLogger("run_draw")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Draw names, pairs or groups.")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in DrawMode],
        help="Draw mode (defaults to the stored mode)",
    )
    parser.add_argument(
        "--viz",
        choices=[v.value for v in Visualization],
        help="Animation used in interactive mode",
    )
    parser.add_argument(
        "--names", help="Comma-separated names replacing the stored list"
    )
    parser.add_argument(
        "--tasks", help="Comma-separated tasks replacing the stored list"
    )
    parser.add_argument("--groups", type=int, help="Number of groups")
    parser.add_argument(
        "--no-repeat", action="store_true", help="Draw names without repetition"
    )
    parser.add_argument("--count", type=int, default=1, help="Number of draws")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--db-url", help="State store URL (defaults to DB_URL)")
    parser.add_argument(
        "--ephemeral",
        action="store_true",
        help="Use a throwaway in-memory store",
    )
    parser.add_argument(
        "--history", action="store_true", help="Print the history afterwards"
    )
    return parser.parse_args(argv)


def _replace_list(orchestrator: DrawOrchestrator, kind: ListKind, csv: str) -> None:
    orchestrator.clear_list(kind)
    # Tasks are added one item per call; names accept several per line.
    for item in csv.split(","):
        orchestrator.add_items(kind, item)


def main(argv=None) -> int:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        format="%(levelname)s [%(name)s] %(message)s",
    )
    args = parse_args(argv)

    if args.ephemeral:
        store = StateStore.from_url("sqlite+pysqlite:///:memory:", create_schema=True)
    else:
        store = StateStore.from_url(args.db_url, create_schema=True)

    scheduler = ManualScheduler()
    orchestrator = DrawOrchestrator(
        scheduler=scheduler,
        rng=random.Random(args.seed),
        store=store,
        notifier=lambda message: print(f"* {message}"),
        on_cue=lambda cue: logger.info(f"cue {cue.value}"),
    )
    orchestrator.subscribe(lambda entry: print(entry.result))

    if args.names is not None:
        _replace_list(orchestrator, ListKind.NAMES, args.names)
    if args.tasks is not None:
        _replace_list(orchestrator, ListKind.TASKS, args.tasks)
    if args.groups is not None:
        orchestrator.set_num_groups(args.groups)
    if args.no_repeat:
        orchestrator.set_no_repeat(ListKind.NAMES, True)
    if args.mode is not None:
        orchestrator.set_mode(DrawMode(args.mode))
    if args.viz is not None:
        orchestrator.set_visualization(Visualization(args.viz))

    status = 0
    for _ in range(max(1, args.count)):
        try:
            orchestrator.request_draw()
        except DrawError as exc:
            print(f"! {exc}")
            status = 1
            continue
        if orchestrator.is_busy:
            elapsed = scheduler.run_until_idle()
            logger.info(f"animation played for {elapsed:.0f} ms of virtual time")

    if args.history:
        print(orchestrator.history_text())
    return status


if __name__ == "__main__":
    raise SystemExit(main())
