import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

from sqlalchemy import delete, select

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from validapro.core.logging import setup_logging
from validapro.database import init_db, session_scope
from validapro.models import ActivityLogEntry, Product, StockEntry, StockHistory, Store, User
from validapro.services.product_service import create_product
from validapro.services.stock_service import upsert_stock
from validapro.services.store_service import create_store
from validapro.services.user_service import ensure_default_admin, get_user_by_username


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample stores, products and stock.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL.")
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging(args.log_level)

    init_db()

    with session_scope() as db:
        if args.reset:
            db.execute(delete(ActivityLogEntry))
            db.execute(delete(StockHistory))
            db.execute(delete(StockEntry))
            db.execute(delete(Product))
            db.execute(delete(Store))
            db.execute(delete(User))
            db.commit()

        ensure_default_admin(db)
        admin = db.execute(select(User).where(User.role == "admin").limit(1)).scalars().first()
        actor_id = admin.id if admin else None

        has_store = db.execute(select(Store.id).limit(1)).first()
        if has_store:
            print("Seed skipped: stores already exist.")
            return

        main_store = create_store(
            db, "Loja Matriz", "lider.matriz", "lider123", "Av. Principal, 1000", actor_id=actor_id
        )
        north_store = create_store(db, "Loja Norte", "lider.norte", "lider123", actor_id=actor_id)

        products = [
            create_product(db, "Iogurte Natural 170g", "7891000100103", "Laticinios", actor_id=actor_id),
            create_product(db, "Leite Integral 1L", "7891000053508", "Laticinios", actor_id=actor_id),
            create_product(db, "Pao de Forma 500g", "7896002301428", "Padaria", actor_id=actor_id),
        ]

        leader = get_user_by_username(db, "lider.matriz")
        today = date.today()
        upsert_stock(db, main_store.id, products[0].id, today + timedelta(days=5), 12, actor_id=leader.id)
        upsert_stock(db, main_store.id, products[1].id, today + timedelta(days=40), 60, actor_id=leader.id)
        upsert_stock(db, main_store.id, products[2].id, today - timedelta(days=1), 4, actor_id=leader.id)
        upsert_stock(db, north_store.id, products[1].id, today + timedelta(days=20), 18, actor_id=actor_id)
        print("Seed data created.")


if __name__ == "__main__":
    main()
