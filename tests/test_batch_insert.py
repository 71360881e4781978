import unittest

from sqlalchemy import select

from app.database.batch import BatchInsert
from app.models import product_sizes
from tests.support import add_product, make_database, seed_reference


class BatchInsertTest(unittest.TestCase):
    def setUp(self):
        self.engine, self.Session = make_database()
        self.db = self.Session()
        self.refs = seed_reference(self.db)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_rejects_row_with_wrong_arity(self):
        batch = BatchInsert(product_sizes, ("product_id", "size_id"))
        with self.assertRaises(ValueError):
            batch.add((1,))
        with self.assertRaises(ValueError):
            batch.add((1, 2, 3))
        self.assertEqual(len(batch), 0)

    def test_rejects_unknown_column(self):
        with self.assertRaises(ValueError):
            BatchInsert(product_sizes, ("product_id", "label"))

    def test_empty_batch_has_no_statement_and_executes_nothing(self):
        batch = BatchInsert(product_sizes, ("product_id", "size_id"))
        with self.assertRaises(ValueError):
            batch.statement()
        self.assertEqual(batch.execute(self.db), 0)

    def test_one_bound_parameter_per_cell(self):
        batch = BatchInsert(product_sizes, ("product_id", "size_id"))
        batch.extend([(1, 1), (1, 2), (1, 3)])
        compiled = batch.statement().compile(dialect=self.engine.dialect)
        self.assertEqual(len(compiled.params), 6)

    def test_execute_inserts_rows_in_order_keeping_duplicates(self):
        product_id = add_product(self.db, self.refs, "P-1")
        sizes = self.refs["sizes"]
        batch = BatchInsert(product_sizes, ("product_id", "size_id"))
        batch.extend([(product_id, sizes["L"]), (product_id, sizes["S"]), (product_id, sizes["L"])])

        inserted = batch.execute(self.db)
        self.db.commit()

        self.assertEqual(inserted, 3)
        rows = self.db.execute(
            select(product_sizes.c.size_id)
            .where(product_sizes.c.product_id == product_id)
            .order_by(product_sizes.c.id)
        ).scalars().all()
        self.assertEqual(rows, [sizes["L"], sizes["S"], sizes["L"]])


if __name__ == "__main__":
    unittest.main()
