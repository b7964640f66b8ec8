import unittest as ut

from azfile.exc import AzFileError
from azfile.storage.core import share_from_config


class DictConfig:
    """Minimal stand-in for zirconium's ApplicationConfig lookups."""

    def __init__(self, values: dict):
        self._values = values

    def as_str(self, key, default=None):
        current = self._values
        for part in key:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return str(current)


class TestShareFromConfig(ut.TestCase):

    def test_share_url(self):
        details = share_from_config(DictConfig({
            "azfile": {"share_url": "https://myaccount.file.core.windows.net/myshare", "work_dir": "/in"},
            "azure": {"storage": {"myaccount": {"connection_string": "conn"}}},
        }))
        self.assertEqual(details["account_name"], "myaccount")
        self.assertEqual(details["share_name"], "myshare")
        self.assertEqual(details["share_url"], "https://myaccount.file.core.windows.net/myshare")
        self.assertEqual(details["connection_string"], "conn")
        self.assertEqual(details["work_dir"], "/in")

    def test_account_and_share(self):
        details = share_from_config(DictConfig({
            "azfile": {"account_name": "acct", "share_name": "data"},
        }))
        self.assertEqual(details["share_url"], "https://acct.file.core.windows.net/data")
        self.assertIsNone(details["connection_string"])
        self.assertEqual(details["work_dir"], "/")

    def test_bad_hostname(self):
        with self.assertRaises(AzFileError):
            share_from_config(DictConfig({"azfile": {"share_url": "https://example.com/share"}}))

    def test_missing_share_name(self):
        with self.assertRaises(AzFileError):
            share_from_config(DictConfig({"azfile": {"share_url": "https://acct.file.core.windows.net/"}}))

    def test_nothing_configured(self):
        with self.assertRaises(AzFileError):
            share_from_config(DictConfig({}))
