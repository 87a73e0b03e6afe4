import unittest
from unittest.mock import patch

from sqlalchemy import func, select

from validapro.config import Settings
from validapro.core.errors import ConstraintViolation, NotFound, ValidationError
from validapro.models import ActivityLogEntry, StockEntry, StockHistory, Store, User
from validapro.services.stock_service import upsert_stock
from validapro.services.store_service import create_store, delete_store, list_stores, update_store
from validapro.services.user_service import authenticate, create_user, ensure_default_admin, list_users
from tests.support import add_product, add_store, add_user, make_session_factory


class StoreServiceTest(unittest.TestCase):
    def setUp(self):
        self.db = make_session_factory()()
        self.admin = add_user(self.db, "root", "admin")

    def tearDown(self):
        self.db.close()

    def test_create_store_links_leader_both_ways(self):
        store = create_store(self.db, "Loja Sul", "lider.sul", "pw", "Rua 1", actor_id=self.admin.id)
        leader = self.db.execute(select(User).where(User.username == "lider.sul")).scalars().one()

        self.assertEqual(store.leader_id, leader.id)
        self.assertEqual(leader.store_id, store.id)
        self.assertEqual(leader.role, "leader")
        self.assertIsNotNone(authenticate(self.db, "lider.sul", "pw"))
        self.assertEqual(
            self.db.execute(select(ActivityLogEntry.activity_type)).scalars().all(),
            ["store_create"],
        )

    def test_duplicate_leader_username(self):
        create_store(self.db, "Loja A", "lider", "pw", actor_id=self.admin.id)
        with self.assertRaises(ConstraintViolation):
            create_store(self.db, "Loja B", "lider", "pw", actor_id=self.admin.id)
        self.assertEqual(self.db.execute(select(func.count()).select_from(Store)).scalar_one(), 1)

    def test_list_stores_includes_stores_without_leader(self):
        create_store(self.db, "Loja A", "lider", "pw", actor_id=self.admin.id)
        add_store(self.db, "Loja B")
        rows = {row["name"]: row for row in list_stores(self.db)}
        self.assertEqual(rows["Loja A"]["leader"], "lider")
        self.assertIsNone(rows["Loja B"]["leader"])

    def test_update_store_renames_and_changes_leader_password(self):
        store = create_store(self.db, "Loja A", "lider", "pw", actor_id=self.admin.id)
        update_store(self.db, store.id, name="Loja Alfa", leader_password="novo", actor_id=self.admin.id)

        self.assertEqual(self.db.get(Store, store.id).name, "Loja Alfa")
        self.assertIsNone(authenticate(self.db, "lider", "pw"))
        self.assertIsNotNone(authenticate(self.db, "lider", "novo"))

    def test_update_missing_store(self):
        with self.assertRaises(NotFound):
            update_store(self.db, 404, name="X", actor_id=self.admin.id)

    def test_delete_store_removes_users_and_stock_but_keeps_history(self):
        store = create_store(self.db, "Loja A", "lider", "pw", actor_id=self.admin.id)
        staff = create_user(self.db, "repo", "pw", "repositor", store.id, actor_id=self.admin.id)
        first = add_product(self.db, "Leite", "78900000001")
        second = add_product(self.db, "Queijo", "78900000002")
        upsert_stock(self.db, store.id, first.id, "2025-01-01", 3, actor_id=staff.id)
        upsert_stock(self.db, store.id, second.id, "2025-01-02", 4, actor_id=staff.id)

        delete_store(self.db, store.id, actor_id=self.admin.id)

        self.assertIsNone(self.db.execute(select(Store).where(Store.id == store.id)).scalars().first())
        self.assertEqual(self.db.execute(select(func.count()).select_from(StockEntry)).scalar_one(), 0)
        self.assertEqual([user.username for user in list_users(self.db)], ["root"])
        change_types = self.db.execute(
            select(StockHistory.change_type).order_by(StockHistory.id)
        ).scalars().all()
        self.assertEqual(change_types, ["insert", "insert", "delete", "delete"])

    def test_delete_store_leaves_written_history_untouched(self):
        store = create_store(self.db, "Loja A", "lider", "pw", actor_id=self.admin.id)
        staff = create_user(self.db, "repo", "pw", "repositor", store.id, actor_id=self.admin.id)
        product = add_product(self.db, "Leite", "78900000001")
        upsert_stock(self.db, store.id, product.id, "2025-01-01", 3, actor_id=staff.id)
        upsert_stock(self.db, store.id, product.id, "2025-01-05", 8, actor_id=staff.id)

        def history_rows():
            return [
                tuple(row)
                for row in self.db.execute(
                    select(StockHistory.__table__).order_by(StockHistory.id)
                ).all()
            ]

        before = history_rows()
        delete_store(self.db, store.id, actor_id=self.admin.id)
        after = history_rows()

        self.assertEqual(after[: len(before)], before)
        self.assertEqual(len(after), len(before) + 1)
        history = self.db.execute(select(StockHistory).order_by(StockHistory.id)).scalars().all()
        self.assertEqual([row.changed_by for row in history], [staff.id, staff.id, self.admin.id])
        self.assertTrue(all(row.stock_id is not None for row in history))

    def test_create_user_validates_role_and_store(self):
        with self.assertRaises(ValidationError):
            create_user(self.db, "x", "pw", "manager", actor_id=self.admin.id)
        with self.assertRaises(NotFound):
            create_user(self.db, "x", "pw", "promoter", 999, actor_id=self.admin.id)
        with self.assertRaises(ConstraintViolation):
            create_user(self.db, "root", "pw", "promoter", actor_id=self.admin.id)

    def test_authenticate_rejects_wrong_password(self):
        self.assertIsNone(authenticate(self.db, "root", "wrong"))
        self.assertIsNone(authenticate(self.db, "nobody", "secret"))
        self.assertEqual(authenticate(self.db, "root", "secret").id, self.admin.id)

    def test_ensure_default_admin_is_idempotent(self):
        settings = Settings(DEFAULT_ADMIN_USERNAME="admin", DEFAULT_ADMIN_PASSWORD="admin123")
        with patch("validapro.services.user_service.get_settings", return_value=settings):
            created = ensure_default_admin(self.db)
            again = ensure_default_admin(self.db)
        self.assertEqual(created.role, "admin")
        self.assertIsNone(again)
        self.assertIsNotNone(authenticate(self.db, "admin", "admin123"))


if __name__ == "__main__":
    unittest.main()
