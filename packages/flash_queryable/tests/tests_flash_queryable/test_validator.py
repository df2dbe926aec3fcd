import logging

import pytest
from flash_queryable import PreconditionError, Validate
from flash_queryable.validator import ArgumentValidation


class TestValidate:
    def test_passing_chain_returns_validate(self):
        """A satisfied chain hands back a Validate for the next argument."""
        result = (
            Validate.argument("source", "source")
            .is_not_null()
            .check()
            .argument(3, "count")
            .is_in_range(lambda x: x > 0)
            .check()
        )
        assert isinstance(result, Validate)

    def test_is_not_null_failure(self):
        with pytest.raises(PreconditionError) as exc_info:
            Validate.argument(None, "source").is_not_null().check()

        error = exc_info.value
        assert error.argument_name == "source"
        assert error.constraint_description == "must not be None"
        assert str(error) == "Argument 'source' must not be None."

    def test_is_in_range_default_description(self):
        with pytest.raises(PreconditionError, match=r"out of range \(got -1\)"):
            Validate.argument(-1, "count").is_in_range(lambda x: x >= 0).check()

    def test_first_violation_wins(self):
        """The range predicate is not evaluated once is_not_null failed."""
        validation = (
            Validate.argument(None, "count")
            .is_not_null()
            .is_in_range(lambda x: x > 0, "must be positive")
        )

        with pytest.raises(PreconditionError, match="must not be None"):
            validation.check()

    def test_later_argument_not_checked_after_failure(self):
        predicate_calls = []

        with pytest.raises(PreconditionError):
            Validate.argument(None, "source").is_not_null().check().argument(
                1, "count"
            ).is_in_range(lambda x: predicate_calls.append(x) or True).check()

        assert predicate_calls == []

    def test_precondition_error_is_value_error(self):
        with pytest.raises(ValueError):
            Validate.argument(None, "source").is_not_null().check()

    def test_failure_is_logged_at_debug(self, caplog):
        with (
            caplog.at_level(logging.DEBUG, logger="flash_queryable.validator"),
            pytest.raises(PreconditionError),
        ):
            Validate.argument(0, "count").is_in_range(lambda x: x > 0).check()

        assert "Precondition failed for count" in caplog.text

    def test_argument_validation_records_value_and_name(self):
        validation = Validate.argument(5, "count")
        assert isinstance(validation, ArgumentValidation)
        assert validation.value == 5
        assert validation.name == "count"
