import os
import unittest
from unittest.mock import patch

from product_service.config import Settings
from product_service.db import InMemoryProductStore
from product_service.dependencies import build_backends
from product_service.storage import InMemoryBlobStore


class SettingsTests(unittest.TestCase):
    def test_legacy_environment_names(self):
        env = {
            "DBCONNSTR": "sqlite+pysqlite:///:memory:",
            "REDISCONNSTR": "localhost:6379",
            "S3_BUCKET": "shop",
            "APP_PORT": "8080",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.database_url, "sqlite+pysqlite:///:memory:")
        self.assertEqual(settings.redis_url, "redis://localhost:6379")
        self.assertEqual(settings.s3_bucket, "shop")
        self.assertEqual(settings.app_port, 8080)

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.app_port, 9090)
        self.assertEqual(settings.api_prefix, "")
        self.assertEqual(settings.event_topic, "product.created")
        self.assertIsNone(settings.redis_url)

    def test_missing_connection_settings_select_in_memory_backends(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)
        backends = build_backends(settings)
        self.assertIsInstance(backends.storage, InMemoryBlobStore)
        self.assertIsInstance(backends.db, InMemoryProductStore)
        backends.close()


if __name__ == "__main__":
    unittest.main()
