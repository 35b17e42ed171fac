import pytest

from config.settings import mask_sensitive_data

pytestmark = pytest.mark.unit


def _mask(**values):
    return mask_sensitive_data(None, None, {"event": "test", **values})


class TestSensitiveDataMasking:
    @pytest.mark.parametrize(
        "phone",
        ["+237 677 123 456", "+237677123456", "237-677-123-456", "677123456"],
    )
    def test_cameroon_phone_masked(self, phone):
        result = _mask(data=f"buyer phone {phone} saved")
        assert phone not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_confirmation_code_key_masked(self):
        assert _mask(confirmation_code="K7Q2ZP")["confirmation_code"] == "***MASKED***"

    def test_password_masked(self):
        result = _mask(data="password='s3cret123'")
        assert "s3cret123" not in result["data"]

    def test_token_masked(self):
        result = _mask(header="token=abc123xyz")
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_non_sensitive_data_unchanged(self):
        result = _mask(transaction_id="TX-001", new_status="escrow_held")
        assert result["transaction_id"] == "TX-001"
        assert result["new_status"] == "escrow_held"
        assert result["event"] == "test"
