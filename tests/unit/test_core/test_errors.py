#!/usr/bin/env python3
"""Tests for the ledger error taxonomy."""

import pytest

from mysalary.core.errors import (
    AccountNotFound,
    AlreadyPosted,
    CategoryTypeMismatch,
    ConcurrentModification,
    CurrencyMismatch,
    InvalidAmount,
    LedgerError,
    LedgerValidationError,
    MissingTransferTarget,
    SameAccountTransfer,
)


class TestErrorTaxonomy:
    """Test error codes and classes."""

    @pytest.mark.parametrize(
        "error_class",
        [InvalidAmount, CategoryTypeMismatch, MissingTransferTarget, SameAccountTransfer, AccountNotFound, CurrencyMismatch],
    )
    def test_write_path_errors_are_validation_errors(self, error_class):
        error = error_class("bad input")
        assert isinstance(error, LedgerValidationError)
        assert error.code == error_class.__name__
        assert not error.retryable

    def test_already_posted_is_not_validation_error(self):
        assert not issubclass(AlreadyPosted, LedgerValidationError)
        assert issubclass(AlreadyPosted, LedgerError)

    def test_concurrent_modification_is_retryable(self):
        error = ConcurrentModification("locked")
        assert error.retryable
        assert error.to_dict() == {"code": "ConcurrentModification", "message": "locked", "retryable": True}

    def test_message_defaults_to_code(self):
        error = InvalidAmount()
        assert error.message == "InvalidAmount"
        assert str(error) == "InvalidAmount"
