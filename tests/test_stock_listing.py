import unittest
from datetime import date

from validapro.services.stock_service import list_stock, summarize_stock, upsert_stock
from tests.support import add_product, add_store, add_user, make_session_factory

AS_OF = date(2025, 1, 1)


class StockListingTest(unittest.TestCase):
    def setUp(self):
        self.db = make_session_factory()()
        self.store = add_store(self.db, "Loja Centro")
        self.other_store = add_store(self.db, "Loja Norte")
        self.actor = add_user(self.db, "admin", "admin")
        stock = [
            ("Iogurte", "78900000001", date(2025, 1, 20), 5),
            ("Leite", "78900000002", date(2025, 1, 5), 10),
            ("Queijo", "78900000003", date(2024, 12, 30), 15),
            ("Manteiga", "78900000004", date(2025, 3, 1), 20),
            ("Pao", "78900000005", date(2025, 1, 8), 25),
        ]
        self.products = {}
        for name, ean, expiration, quantity in stock:
            product = add_product(self.db, name, ean)
            self.products[name] = product
            upsert_stock(self.db, self.store.id, product.id, expiration, quantity, actor_id=self.actor.id)
        upsert_stock(
            self.db,
            self.other_store.id,
            self.products["Leite"].id,
            date(2025, 1, 3),
            12,
            actor_id=self.actor.id,
        )

    def tearDown(self):
        self.db.close()

    def test_quantity_bounds_are_inclusive_and_store_scoped(self):
        items = list_stock(self.db, self.store.id, min_quantity=10, max_quantity=20, as_of=AS_OF)
        self.assertEqual(sorted(item["quantity"] for item in items), [10, 15, 20])
        self.assertTrue(all(item["store_id"] == self.store.id for item in items))

    def test_date_bounds_are_inclusive(self):
        items = list_stock(
            self.db,
            self.store.id,
            start_date=date(2025, 1, 5),
            end_date="2025-01-20",
            as_of=AS_OF,
        )
        self.assertEqual([item["name"] for item in items], ["Leite", "Pao", "Iogurte"])

    def test_rows_are_ordered_by_expiration(self):
        items = list_stock(self.db, self.store.id, as_of=AS_OF)
        expirations = [item["expiration_date"] for item in items]
        self.assertEqual(expirations, sorted(expirations))
        self.assertEqual(len(items), 5)

    def test_rows_carry_product_fields_and_days_remaining(self):
        items = list_stock(self.db, self.store.id, as_of=AS_OF)
        by_name = {item["name"]: item for item in items}
        self.assertEqual(by_name["Leite"]["ean"], "78900000002")
        self.assertEqual(by_name["Leite"]["days_remaining"], 4)
        self.assertEqual(by_name["Queijo"]["days_remaining"], -2)
        self.assertEqual(by_name["Manteiga"]["days_remaining"], 59)

    def test_empty_store_returns_nothing(self):
        empty = add_store(self.db, "Loja Vazia")
        self.assertEqual(list_stock(self.db, empty.id), [])

    def test_summary_counts(self):
        items = list_stock(self.db, self.store.id, as_of=AS_OF)
        summary = summarize_stock(items, low_stock_threshold=15, expiring_soon_days=10)
        self.assertEqual(summary["total_entries"], 5)
        self.assertEqual(summary["total_units"], 75)
        self.assertEqual(summary["low_stock"], 2)
        # Leite (4), Pao (7), Queijo (-2)
        self.assertEqual(summary["expiring_soon"], 3)
        self.assertEqual(summary["expired"], 1)


if __name__ == "__main__":
    unittest.main()
