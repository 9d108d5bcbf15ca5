import unittest

from product_service.db import SqlProductStore


class SqlProductStoreTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the Postgres store logic.
    """

    def setUp(self):
        self.db = SqlProductStore("sqlite+pysqlite:///:memory:")

    def tearDown(self):
        self.db.close()

    def test_insert_assigns_increasing_ids(self):
        first = self.db.insert_product("Chair", "http://s3/bucket/chair.png")
        second = self.db.insert_product("Table", "http://s3/bucket/table.png")
        self.assertGreater(first.id, 0)
        self.assertGreater(second.id, first.id)
        self.assertEqual(first.name, "Chair")
        self.assertEqual(first.photo_key, "http://s3/bucket/chair.png")
        self.assertIsNotNone(first.created_at)

    def test_get_product(self):
        created = self.db.insert_product("Chair", "chair.png")
        fetched = self.db.get_product(created.id)
        self.assertIsNotNone(fetched)
        self.assertEqual(fetched.as_dict(), created.as_dict())
        self.assertIsNone(self.db.get_product(created.id + 100))

    def test_list_products_in_insertion_order(self):
        for index in range(7):
            self.db.insert_product(f"item-{index}", f"{index}.png")
        page = self.db.list_products(offset=5, limit=5)
        self.assertEqual([p.name for p in page], ["item-5", "item-6"])
        self.assertEqual(self.db.list_products(offset=10, limit=5), [])

    def test_delete_product(self):
        created = self.db.insert_product("Chair", "chair.png")
        self.assertTrue(self.db.delete_product(created.id))
        self.assertIsNone(self.db.get_product(created.id))
        self.assertFalse(self.db.delete_product(created.id))

    def test_requires_url(self):
        with self.assertRaises(ValueError):
            SqlProductStore("")


if __name__ == "__main__":
    unittest.main()
