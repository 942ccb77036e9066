from __future__ import annotations

import argparse
import logging

from timesheets.db import session_scope
from timesheets.service import TimesheetService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compare stored yearly totals with a recomputation from the day records."
    )
    parser.add_argument(
        "--repair",
        action="store_true",
        help="Rewrite drifting yearly totals from the day records.",
    )
    return parser


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args()

    with session_scope() as db:
        service = TimesheetService(db)
        drifts = service.verify_rollups()

        for drift in drifts:
            logger.warning(
                "%d: stored=%s recomputed=%s", drift.year, drift.persisted, drift.recomputed
            )

        if not drifts:
            logger.info("All yearly totals match their day records")
            return 0

        if args.repair:
            service.rebuild_rollups([d.year for d in drifts])
            logger.info("Repaired %d year(s)", len(drifts))
            return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
