import pytest

from config.settings import mask_sensitive_data

pytestmark = pytest.mark.unit

MASK = "***MASKED***"


class TestCardNumberMasking:
    @pytest.mark.parametrize(
        "card",
        ["4111111111110000", "4111 1111 1111 0000", "4111-1111-1111-0000", "378282246310005"],
    )
    def test_card_numbers_in_free_text_are_masked(self, card):
        result = mask_sensitive_data(None, None, {"event": "test", "data": f"card {card} used"})
        assert card not in result["data"]
        assert result["data"] == f"card {MASK} used"

    def test_card_number_key_is_masked(self):
        result = mask_sensitive_data(None, None, {"event": "test", "card_number": "0000"})
        assert result["card_number"] == MASK

    def test_card_number_assignment_is_masked(self):
        result = mask_sensitive_data(
            None, None, {"event": "test", "data": "card_number=4111-xxxx"}
        )
        assert "4111-xxxx" not in result["data"]

    def test_card_number_ending_a_sentence_is_masked(self):
        result = mask_sensitive_data(
            None, None, {"event": "test", "data": "charged 4111111111110000."}
        )
        assert result["data"] == f"charged {MASK}."


class TestSecretMasking:
    def test_password_masked(self):
        result = mask_sensitive_data(None, None, {"event": "test", "data": "password='s3cret123'"})
        assert "s3cret123" not in result["data"]
        assert MASK in result["data"]

    def test_token_masked(self):
        result = mask_sensitive_data(None, None, {"event": "test", "header": "token=abc123xyz"})
        assert "abc123xyz" not in result["header"]

    @pytest.mark.parametrize("key", ["password", "Authorization", "api_key", "secret"])
    def test_sensitive_keys_masked(self, key):
        result = mask_sensitive_data(None, None, {"event": "test", key: "value-1"})
        assert result[key] == MASK


class TestIdentifiersUnchanged:
    @pytest.mark.parametrize(
        "value",
        [
            "0190c8a0-1234-7000-8000-123456789012",
            "CC_0A1B2C3D4E5F6789_1760870000",
            "ORD-20261019-A1B2C3",
            "150.00",
            "2026-10-19T13:03:00.123456+00:00",
        ],
    )
    def test_identifiers_are_not_masked(self, value):
        result = mask_sensitive_data(None, None, {"event": "payment.processed", "ref": value})
        assert result["ref"] == value

    def test_non_string_values_pass_through(self):
        result = mask_sensitive_data(None, None, {"event": "test", "retries": 3, "error": None})
        assert result == {"event": "test", "retries": 3, "error": None}

    @pytest.mark.parametrize(
        "amount", ["99999999999999.00", "100000000000000.50", "1234567890123.5"]
    )
    def test_large_amounts_are_not_masked(self, amount):
        result = mask_sensitive_data(
            None, None, {"event": "order.created", "data": f"total_amount={amount}"}
        )
        assert result["data"] == f"total_amount={amount}"
