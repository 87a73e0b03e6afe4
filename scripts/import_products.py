import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from validapro.core.errors import ValidaProError
from validapro.core.logging import setup_logging
from validapro.database import init_db, session_scope
from validapro.services.ingestion_service import import_products_workbook
from validapro.services.user_service import get_user_by_username


def parse_args():
    parser = argparse.ArgumentParser(
        description="Import catalog products (name, ean, category) from an Excel workbook."
    )
    parser.add_argument("--path", required=True, help="Path to .xlsx workbook.")
    parser.add_argument("--as-user", default="admin", help="Username recorded in the activity log.")
    parser.add_argument("--dry-run", action="store_true", help="Validate without saving.")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL.")
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging(args.log_level)
    init_db()

    try:
        with session_scope() as db:
            actor = get_user_by_username(db, args.as_user)
            results = import_products_workbook(
                db,
                args.path,
                actor_id=actor.id if actor else None,
                dry_run=args.dry_run,
            )
    except ValidaProError as exc:
        raise SystemExit(f"Import failed: {exc.message}") from exc

    print(f"{results['inserted']} inserted, {results['skipped']} skipped")
    for error in results["errors"]:
        print(f"  row {error['row']}: {error['error']}")

    if args.dry_run:
        print("Dry run complete, no changes committed.")
    else:
        print("Import complete.")


if __name__ == "__main__":
    main()
