"""
Tests for sensitive data masking.
"""

import pytest

from api_client.utils.sanitizer import (
    DEFAULT_MASK,
    SENSITIVE_KEYS,
    add_sensitive_keys,
    is_sensitive_key,
    mask_headers,
    mask_sensitive_data,
)


class TestIsSensitiveKey:

    @pytest.mark.parametrize("key", [
        "Authorization", "X-API-Key", "password", "access_token", "Set-Cookie", "xero_client_secret",
    ])
    def test_sensitive(self, key):
        assert is_sensitive_key(key)

    @pytest.mark.parametrize("key", ["author", "method", "status_code", "url", "Xero-tenant-id"])
    def test_not_sensitive(self, key):
        assert not is_sensitive_key(key)


class TestMaskSensitiveData:

    def test_nested_structures(self):
        data = {"user": {"password": "p", "name": "n"}, "items": [{"token": "t"}], "page": 1}
        assert mask_sensitive_data(data) == {
            "user": {"password": DEFAULT_MASK, "name": "n"},
            "items": [{"token": DEFAULT_MASK}],
            "page": 1,
        }

    def test_strings(self):
        assert mask_sensitive_data("Authorization: Bearer abc.def") == \
            "Authorization: Bearer ***REDACTED***"
        assert mask_sensitive_data("https://x.io/a?api_key=k1&page=2") == \
            "https://x.io/a?api_key=***REDACTED***&page=2"

    def test_scalars_untouched(self):
        assert mask_sensitive_data(None) is None
        assert mask_sensitive_data(5) == 5
        assert mask_sensitive_data(True) is True

    def test_tuple_type_kept(self):
        assert mask_sensitive_data(("password=x",)) == ("password=***REDACTED***",)

    def test_input_not_modified(self):
        data = {"password": "p"}
        mask_sensitive_data(data)
        assert data == {"password": "p"}

    def test_custom_mask(self):
        assert mask_sensitive_data({"secret": "s"}, mask="<hidden>") == {"secret": "<hidden>"}


def test_mask_headers():
    assert mask_headers({"Authorization": "Bearer t", "Xero-tenant-id": "42"}) == {
        "Authorization": DEFAULT_MASK,
        "Xero-tenant-id": "42",
    }


def test_add_sensitive_keys():
    try:
        add_sensitive_keys("Budget_Sync_Id")
        assert is_sensitive_key("budget_sync_id")
    finally:
        SENSITIVE_KEYS.discard("budget_sync_id")
