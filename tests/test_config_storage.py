import tempfile
import unittest
from pathlib import Path

from oa_client.config import DEFAULT_BASE_URL, ClientConfig, load_config
from oa_client.storage import TOKEN_KEY, FileStorage, MemoryStorage


class TestConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = load_config({})
        self.assertEqual(cfg.base_url, DEFAULT_BASE_URL)
        self.assertIsNone(cfg.timeout)
        self.assertEqual(cfg.log_level, "WARNING")
        self.assertEqual(cfg.storage_path, Path("~/.oa_client/storage.json").expanduser())

    def test_environment_overrides(self):
        cfg = load_config(
            {
                "OA_API_BASE_URL": "https://oa.example.com/api/",
                "OA_CLIENT_HOME": "/tmp/oa-home",
                "OA_CLIENT_TIMEOUT": "2.5",
                "OA_LOG_LEVEL": "debug",
            }
        )
        self.assertEqual(cfg.base_url, "https://oa.example.com/api")
        self.assertEqual(cfg.storage_path, Path("/tmp/oa-home/storage.json"))
        self.assertEqual(cfg.timeout, 2.5)
        self.assertEqual(cfg.log_level, "DEBUG")

    def test_invalid_timeout(self):
        with self.assertRaises(ValueError):
            load_config({"OA_CLIENT_TIMEOUT": "0"})
        with self.assertRaises(ValueError):
            load_config({"OA_CLIENT_TIMEOUT": "soon"})

    def test_config_is_frozen(self):
        cfg = ClientConfig()
        with self.assertRaises(AttributeError):
            cfg.base_url = "x"  # type: ignore[misc]


class TestStorage(unittest.TestCase):
    def test_memory_storage(self):
        s = MemoryStorage({"a": "1"})
        s.set_item(TOKEN_KEY, "abc")
        self.assertEqual(sorted(s.keys()), ["a", TOKEN_KEY])
        s.remove_item("missing")
        s.clear()
        self.assertIsNone(s.get_item(TOKEN_KEY))

    def test_file_storage_persists(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "storage.json"
            first = FileStorage(path)
            first.set_item(TOKEN_KEY, "abc")
            first.set_item("user", '{"name":"Tess"}')
            first.remove_item("user")

            second = FileStorage(path)
            self.assertEqual(second.get_item(TOKEN_KEY), "abc")
            self.assertIsNone(second.get_item("user"))

            second.clear()
            self.assertEqual(FileStorage(path).keys(), [])

    def test_corrupt_file_is_ignored(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "storage.json"
            path.write_text("{not json", encoding="utf-8")
            with self.assertLogs("oa_client.storage", level="WARNING"):
                storage = FileStorage(path)
            self.assertEqual(storage.keys(), [])
            path.write_text("[1, 2]", encoding="utf-8")
            self.assertEqual(FileStorage(path).keys(), [])


if __name__ == "__main__":
    unittest.main()
