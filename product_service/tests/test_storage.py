import io
import unittest
from unittest.mock import MagicMock, patch

from product_service.storage import InMemoryBlobStore, S3BlobStore


class InMemoryBlobStoreTests(unittest.TestCase):
    def test_put_get_delete(self):
        store = InMemoryBlobStore()
        store.put_object("a.png", b"abc", "image/png")
        stored = store.get_object("a.png")
        self.assertEqual(stored.body.read(), b"abc")
        self.assertEqual(stored.content_length, 3)
        self.assertEqual(stored.content_type, "image/png")

        store.delete_object("a.png")
        with self.assertRaises(FileNotFoundError):
            store.get_object("a.png")
        # Deleting again is not an error.
        store.delete_object("a.png")

    def test_durable_reference(self):
        store = InMemoryBlobStore(endpoint="http://minio:9000", bucket="shop")
        self.assertEqual(
            store.object_url("chair.png"), "http://minio:9000/shop/chair.png"
        )


class S3BlobStoreTests(unittest.TestCase):
    def setUp(self):
        patcher = patch("product_service.storage.boto3.client")
        self.mock_client_factory = patcher.start()
        self.addCleanup(patcher.stop)
        self.client = MagicMock()
        self.mock_client_factory.return_value = self.client
        self.store = S3BlobStore(
            bucket="shop",
            region="us-east-1",
            endpoint="http://minio:9000/",
            access_key_id="key",
            secret_access_key="secret",
        )

    def test_client_uses_path_style(self):
        _, kwargs = self.mock_client_factory.call_args
        self.assertEqual(kwargs["endpoint_url"], "http://minio:9000/")
        self.assertEqual(kwargs["config"].s3["addressing_style"], "path")

    def test_put_object_sets_attachment_headers(self):
        self.store.put_object("chair.png", b"abc", "image/png")
        self.client.put_object.assert_called_once_with(
            Bucket="shop",
            Key="chair.png",
            Body=b"abc",
            ContentLength=3,
            ContentType="image/png",
            ContentDisposition="attachment",
        )

    def test_get_object_wraps_response(self):
        self.client.get_object.return_value = {
            "Body": io.BytesIO(b"abc"),
            "ContentLength": 3,
            "ContentType": "image/png",
        }
        stored = self.store.get_object("chair.png")
        self.client.get_object.assert_called_once_with(Bucket="shop", Key="chair.png")
        self.assertEqual(stored.body.read(), b"abc")
        self.assertEqual(stored.content_length, 3)
        self.assertEqual(stored.content_type, "image/png")

    def test_delete_object(self):
        self.store.delete_object("chair.png")
        self.client.delete_object.assert_called_once_with(
            Bucket="shop", Key="chair.png"
        )

    def test_durable_reference(self):
        self.assertEqual(
            self.store.object_url("chair.png"), "http://minio:9000/shop/chair.png"
        )


if __name__ == "__main__":
    unittest.main()
