"""
Report (and optionally repair) fee/result records whose student-scoped and global
copies have diverged.

  python -m app.scripts.reconcile_records            # report only
  python -m app.scripts.reconcile_records --repair   # rewrite diverged copies
"""
import argparse
import asyncio

from app.core.enums import RecordKind
from app.core.logging import configure_logging
from app.core.config import settings
from app.core.reconciliation import reconcile_records
from app.db.session import AsyncSessionLocal


async def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--repair", action="store_true", help="Rewrite diverged copies")
    args = parser.parse_args(argv)
    configure_logging(settings.log_level)

    diverged = False
    async with AsyncSessionLocal() as db:
        for kind in RecordKind:
            report = await reconcile_records(db, kind, repair=args.repair)
            print(
                f"{kind.value}: scoped={report.scoped_count} global={report.global_count} "
                f"missing_global={len(report.missing_global)} missing_scoped={len(report.missing_scoped)} "
                f"mismatched={len(report.mismatched)} orphaned={len(report.orphaned)} "
                f"repaired={report.repaired}"
            )
            diverged = diverged or not report.is_consistent
    return 1 if diverged and not args.repair else 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
