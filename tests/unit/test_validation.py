"""Tests for amount and username validation."""

import pytest

from src.sp_common.errors import InvalidAmountError, InvalidUsernameError
from src.sp_common.validation import DEFAULT_MAX_AMOUNT, validate_amount, validate_username


class TestValidateAmount:
    @pytest.mark.parametrize("amount", [1, 500, DEFAULT_MAX_AMOUNT])
    def test_accepts_in_range(self, amount: int) -> None:
        assert validate_amount(amount) == amount

    @pytest.mark.parametrize("amount", [0, -1, DEFAULT_MAX_AMOUNT + 1])
    def test_rejects_out_of_range(self, amount: int) -> None:
        with pytest.raises(InvalidAmountError):
            validate_amount(amount)

    @pytest.mark.parametrize("amount", [True, 1.5, "10", None])
    def test_rejects_non_integers(self, amount: object) -> None:
        with pytest.raises(InvalidAmountError):
            validate_amount(amount)

    def test_custom_maximum(self) -> None:
        assert validate_amount(100, maximum=100) == 100
        with pytest.raises(InvalidAmountError):
            validate_amount(101, maximum=100)


class TestValidateUsername:
    @pytest.mark.parametrize("username", ["alice", "bob_1", "A1B2C3D4E5F6G7H8"])
    def test_accepts_valid(self, username: str) -> None:
        assert validate_username(username) == username

    @pytest.mark.parametrize(
        "username", ["bob", "a" * 17, "al ice", "alice!", "", "élodie", None]
    )
    def test_rejects_invalid(self, username: object) -> None:
        with pytest.raises(InvalidUsernameError):
            validate_username(username)
