import tempfile
import unittest
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.core.constants import PRODUCT_CREATE_FAILED_MESSAGE, PRODUCT_DETAIL_FAILED_MESSAGE
from app.dependencies import get_db, get_storage
from app.main import app
from app.services.storage_service import LocalFileStorage
from tests.support import add_product, count_rows, make_database, seed_reference


class CatalogApiTest(unittest.TestCase):
    def setUp(self):
        self.engine, self.Session = make_database()
        self.db = self.Session()
        self.refs = seed_reference(self.db)
        self.tmp = tempfile.TemporaryDirectory()
        self.storage = LocalFileStorage(Path(self.tmp.name), "/uploads")

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_storage] = lambda: self.storage
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.db.close()
        self.engine.dispose()
        self.tmp.cleanup()

    def _form(self, **overrides):
        data = {
            "code": "SN-1",
            "name": "Runner",
            "price": "89.50",
            "categoryId": str(self.refs["category_id"]),
            "typeId": str(self.refs["type_id"]),
            "brandId": str(self.refs["brand_id"]),
        }
        data.update(overrides)
        return data

    def test_list_products(self):
        add_product(self.db, self.refs, "P-1", sizes=["S", "M"], ratings=[4, 5])
        response = self.client.get("/products")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body), 1)
        self.assertEqual(body[0]["average_rating"], 4.5)
        self.assertEqual(sorted(body[0]["sizes"]), ["M", "S"])
        self.assertEqual(body[0]["category"], "Men")

    def test_missing_product_returns_404(self):
        before = count_rows(self.db)
        response = self.client.get("/products/12345")
        self.assertEqual(response.status_code, 404)
        self.assertIn("detail", response.json())
        self.assertEqual(count_rows(self.db), before)

    def test_product_detail(self):
        product_id = add_product(self.db, self.refs, "P-1", sizes=["L", "S"], ratings=[3])
        response = self.client.get("/products/{}".format(product_id))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["sizes"], ["L", "S"])
        self.assertEqual(body["reviews"][0]["rating"], 3)
        self.assertIn("created_at", body)
        self.assertIn("updated_at", body)

    def test_reference_lists(self):
        self.assertEqual(self.client.get("/categories").json(), [{"id": self.refs["category_id"], "name": "Men"}])
        self.assertEqual(self.client.get("/brands").json()[0]["name"], "Nike")
        self.assertEqual(self.client.get("/types").json()[0]["name"], "T-Shirt")
        labels = [size["label"] for size in self.client.get("/sizes").json()]
        self.assertEqual(labels, ["S", "M", "L"])

    def test_create_without_price_returns_400_and_writes_nothing(self):
        before = count_rows(self.db)
        data = self._form()
        del data["price"]
        response = self.client.post(
            "/createProduct",
            data=data,
            files=[("images", ("a.png", b"png", "image/png"))],
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("price", response.json()["detail"])
        self.assertEqual(count_rows(self.db), before)
        self.assertEqual(list(Path(self.tmp.name).iterdir()), [])

    def test_create_with_sizes_and_images(self):
        sizes = self.refs["sizes"]
        response = self.client.post(
            "/createProduct",
            data=self._form(sizes=[str(sizes["S"]), str(sizes["M"])]),
            files=[
                ("images", ("a.png", b"one", "image/png")),
                ("images", ("b.png", b"two", "image/png")),
                ("images", ("c.jpg", b"three", "image/jpeg")),
            ],
        )
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["message"], "Product created")
        self.assertEqual(
            count_rows(self.db),
            {"products": 1, "product_sizes": 2, "product_images": 3},
        )

        detail = self.client.get("/products/{}".format(body["id"])).json()
        self.assertEqual(detail["sizes"], ["S", "M"])
        self.assertEqual(len(detail["images"]), 3)
        self.assertEqual(Decimal(detail["price"]), Decimal("89.50"))

    def test_create_accepts_bracketed_size_fields(self):
        response = self.client.post(
            "/createProduct",
            data=self._form(**{"sizes[]": [str(self.refs["sizes"]["L"])]}),
        )
        self.assertEqual(response.status_code, 201)
        detail = self.client.get("/products/{}".format(response.json()["id"])).json()
        self.assertEqual(detail["sizes"], ["L"])

    def test_create_with_unknown_category_returns_400(self):
        response = self.client.post(
            "/createProduct",
            data=self._form(categoryId="999"),
            files=[("images", ("a.png", b"png", "image/png"))],
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("categoryId", response.json()["detail"])
        self.assertEqual(count_rows(self.db)["products"], 0)
        self.assertEqual(list(Path(self.tmp.name).iterdir()), [])

    def test_create_with_out_of_range_category_returns_400(self):
        before = count_rows(self.db)
        response = self.client.post(
            "/createProduct",
            data=self._form(categoryId="99999999999999999999"),
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("categoryId", response.json()["detail"])
        self.assertEqual(count_rows(self.db), before)

    def test_out_of_range_product_id_returns_404(self):
        response = self.client.get("/products/99999999999999999999")
        self.assertEqual(response.status_code, 404)
        self.assertIn("detail", response.json())

    def test_detail_datastore_failure_returns_generic_500(self):
        product_id = add_product(self.db, self.refs, "P-1", sizes=["S"])
        failure = OperationalError("SELECT", {}, Exception("connection lost"))
        with patch(
            "app.services.catalog_queries.fetch_product_size_labels",
            side_effect=failure,
        ):
            response = self.client.get("/products/{}".format(product_id))
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": PRODUCT_DETAIL_FAILED_MESSAGE})

    def test_create_datastore_failure_returns_generic_500(self):
        before = count_rows(self.db)
        failure = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with patch(
            "app.services.catalog_queries.insert_product_sizes",
            side_effect=failure,
        ):
            response = self.client.post(
                "/createProduct",
                data=self._form(sizes=[str(self.refs["sizes"]["S"])]),
            )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": PRODUCT_CREATE_FAILED_MESSAGE})
        self.assertEqual(count_rows(self.db), before)

    def test_upload_requires_file(self):
        response = self.client.post("/upload")
        self.assertEqual(response.status_code, 400)

    def test_upload_returns_url_and_filename(self):
        response = self.client.post(
            "/upload",
            files={"image": ("banner.webp", b"webp-bytes", "image/webp")},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["filename"].endswith(".webp"))
        self.assertEqual(body["url"], "/uploads/{}".format(body["filename"]))
        self.assertEqual((Path(self.tmp.name) / body["filename"]).read_bytes(), b"webp-bytes")


if __name__ == "__main__":
    unittest.main()
