#!/usr/bin/env python3
"""
Kindred — Stage classification backfill

Re-parses every profile's free-text ``stage_descriptor`` into the stored
``stage_kind`` / ``stage_number`` columns.  Run it after changing the
classification rules, or once for profiles written before the columns
existed.

Usage examples
--------------
  # Report what would change without writing
  python scripts/backfill_stage_classification.py --dry-run

  # Apply, listing every changed profile
  python scripts/backfill_stage_classification.py --verbose
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections import Counter

# Ensure the project root is importable
sys.path.insert(0, ".")

from sqlalchemy import select

from app.database import async_session_factory, utcnow
from app.models.profile import Profile
from app.utils.stage import classify_stage


async def backfill(args: argparse.Namespace) -> None:
    kinds: Counter[str] = Counter()
    changed = 0

    async with async_session_factory() as session:
        result = await session.execute(select(Profile).order_by(Profile.id))
        profiles = list(result.scalars().all())

        for profile in profiles:
            stage = classify_stage(profile.stage_descriptor)
            kinds[stage.kind.value] += 1

            if (profile.stage_kind, profile.stage_number) == (stage.kind.value, stage.stage_number):
                continue

            changed += 1
            if args.verbose:
                print(
                    f"  {profile.id:<36} {profile.stage_descriptor!r}: "
                    f"{profile.stage_kind}/{profile.stage_number} -> "
                    f"{stage.kind.value}/{stage.stage_number}"
                )
            if not args.dry_run:
                profile.stage_kind = stage.kind.value
                profile.stage_number = stage.stage_number
                profile.updated_at = utcnow()

        if args.dry_run:
            await session.rollback()
        else:
            await session.commit()

    print(f"\n{'=' * 60}")
    print(f"  Stage Classification Backfill{' (dry run)' if args.dry_run else ''}")
    print(f"{'=' * 60}")
    print(f"  Profiles scanned:  {len(profiles)}")
    print(f"  Profiles changed:  {changed}")
    for kind, count in sorted(kinds.items()):
        print(f"    {kind:<10} {count}")
    print(f"{'=' * 60}\n")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Re-classify stored stage descriptors into stage_kind / stage_number.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Report changes without writing them.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=False,
        help="Print every profile whose classification changes.",
    )

    args = parser.parse_args()
    asyncio.run(backfill(args))


if __name__ == "__main__":
    main()
