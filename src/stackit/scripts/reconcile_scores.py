"""Compare stored question and answer scores with the vote ledger.

Run periodically or after an incident:

    python -m stackit.scripts.reconcile_scores            # report only
    python -m stackit.scripts.reconcile_scores --repair   # rewrite drifting scores

Exits with status 1 when drift was found and left unrepaired.
"""
from __future__ import annotations

import argparse
import sys

from stackit.core.logging import configure_logging
from stackit.db.bootstrap import verify_schema
from stackit.db.session import SessionLocal, engine
from stackit.services import scoring


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Reconcile vote scores against the ledger")
    parser.add_argument(
        "--repair",
        action="store_true",
        help="Overwrite drifting scores with the totals recomputed from the ledger.",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL for this run")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    verify_schema(engine)

    db = SessionLocal()
    try:
        drift = scoring.reconcile(db, repair=args.repair)
    finally:
        db.close()

    for entry in drift:
        print(f"{entry.kind.value} {entry.id}: stored={entry.stored} ledger={entry.recomputed}")
    if not drift:
        print("[reconcile] no drift")
        return 0
    if args.repair:
        print(f"[reconcile] repaired {len(drift)} scores")
        return 0
    print(f"[reconcile] {len(drift)} scores drifted; rerun with --repair to fix", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
