import unittest

from validapro.core.errors import ConstraintViolation, ValidationError
from validapro.services.product_service import create_product, list_products, normalize_ean, search_products
from tests.support import add_user, make_session_factory


class ProductServiceTest(unittest.TestCase):
    def setUp(self):
        self.db = make_session_factory()()
        self.actor = add_user(self.db, "promoter", "promoter")

    def tearDown(self):
        self.db.close()

    def test_create_trims_fields(self):
        product = create_product(self.db, "  Leite  ", " 7891000053508 ", "Laticinios", actor_id=self.actor.id)
        self.assertEqual(product.name, "Leite")
        self.assertEqual(product.ean, "7891000053508")
        self.assertEqual(product.category, "Laticinios")

    def test_short_ean_is_rejected(self):
        with self.assertRaises(ValidationError):
            create_product(self.db, "Leite", "1234567", actor_id=self.actor.id)

    def test_blank_name_is_rejected(self):
        with self.assertRaises(ValidationError):
            create_product(self.db, "   ", "12345678", actor_id=self.actor.id)

    def test_duplicate_ean_is_a_constraint_violation(self):
        create_product(self.db, "Leite", "12345678", actor_id=self.actor.id)
        with self.assertRaises(ConstraintViolation):
            create_product(self.db, "Outro", "12345678", actor_id=self.actor.id)
        self.assertEqual(len(list_products(self.db)), 1)

    def test_numeric_cells_become_digit_strings(self):
        self.assertEqual(normalize_ean(7891000053508.0), "7891000053508")

    def test_search_matches_name_or_ean(self):
        create_product(self.db, "Leite Integral", "7891000053508", actor_id=self.actor.id)
        create_product(self.db, "Iogurte", "7891000100103", actor_id=self.actor.id)
        create_product(self.db, "Pao de Forma", "7896002301428", actor_id=self.actor.id)

        self.assertEqual([p.name for p in search_products(self.db, "leite")], ["Leite Integral"])
        self.assertEqual([p.name for p in search_products(self.db, "78910001")], ["Iogurte"])
        self.assertEqual(len(search_products(self.db, "7891")), 2)
        self.assertEqual(len(search_products(self.db, "")), 3)


if __name__ == "__main__":
    unittest.main()
