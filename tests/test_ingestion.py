import base64
import unittest
from io import BytesIO

from openpyxl import Workbook
from sqlalchemy import select

from validapro.core.errors import ValidationError
from validapro.models import ActivityLogEntry, Product
from validapro.services.ingestion_service import (
    decode_upload,
    import_products_workbook,
    normalize_header,
)
from tests.support import add_product, add_user, make_session_factory


def workbook_bytes(rows):
    workbook = Workbook()
    worksheet = workbook.active
    for row in rows:
        worksheet.append(row)
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class ProductImportTest(unittest.TestCase):
    def setUp(self):
        self.db = make_session_factory()()
        self.actor = add_user(self.db, "admin", "admin")

    def tearDown(self):
        self.db.close()

    def test_header_aliases(self):
        self.assertEqual(normalize_header("Product Name"), "name")
        self.assertEqual(normalize_header("EAN-13"), "ean")
        self.assertEqual(normalize_header("Bar Code"), "ean")
        self.assertEqual(normalize_header(" Category "), "category")

    def test_imports_valid_rows_and_skips_the_rest(self):
        add_product(self.db, "Existente", "7890000000000")
        content = workbook_bytes(
            [
                ["Name", "EAN", "Category"],
                ["Leite", "7891000053508", "Laticinios"],
                ["Iogurte", 7891000100103, None],
                ["Duplicado no arquivo", "7891000053508", None],
                ["Ja cadastrado", "7890000000000", None],
                [None, "7896002301428", None],
                ["Curto", "123", None],
                [None, None, None],
            ]
        )

        results = import_products_workbook(self.db, content, actor_id=self.actor.id)

        self.assertEqual(results["inserted"], 2)
        self.assertEqual(results["skipped"], 4)
        self.assertEqual([error["row"] for error in results["errors"]], [4, 5, 6, 7])
        eans = set(self.db.execute(select(Product.ean)).scalars().all())
        self.assertEqual(eans, {"7890000000000", "7891000053508", "7891000100103"})
        activity = self.db.execute(select(ActivityLogEntry)).scalars().one()
        self.assertEqual(activity.activity_type, "product_import")

    def test_dry_run_writes_nothing(self):
        content = workbook_bytes([["name", "ean"], ["Leite", "7891000053508"]])
        results = import_products_workbook(self.db, content, actor_id=self.actor.id, dry_run=True)
        self.assertEqual(results["inserted"], 1)
        self.assertEqual(self.db.execute(select(Product)).scalars().all(), [])

    def test_missing_required_column(self):
        content = workbook_bytes([["name", "category"], ["Leite", "Laticinios"]])
        with self.assertRaises(ValidationError):
            import_products_workbook(self.db, content, actor_id=self.actor.id)

    def test_sheet_without_rows(self):
        content = workbook_bytes([["name", "ean"]])
        with self.assertRaises(ValidationError):
            import_products_workbook(self.db, content, actor_id=self.actor.id)

    def test_rejects_non_workbook_bytes(self):
        with self.assertRaises(ValidationError):
            import_products_workbook(self.db, b"plain text", actor_id=self.actor.id)

    def test_decode_upload(self):
        encoded = base64.b64encode(b"payload").decode("ascii")
        self.assertEqual(decode_upload(encoded), b"payload")
        self.assertEqual(decode_upload("data:application/octet-stream;base64," + encoded), b"payload")
        with self.assertRaises(ValidationError):
            decode_upload("***")


if __name__ == "__main__":
    unittest.main()
