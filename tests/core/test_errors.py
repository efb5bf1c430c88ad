"""Tests for error types and codes."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import FrozenInstanceError

import pytest

from docgraph.core.errors import (
    ConfigError,
    ConversionError,
    DocGraphError,
    ErrorCode,
    InternalError,
    ModelError,
    RegistryError,
    SemanticModelError,
    SerializationError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONVERSION_SIGNATURE_UNRESOLVED, 3000),
            (ErrorCode.MODEL_ALREADY_CONTAINED, 4000),
            (ErrorCode.REGISTRY_DUPLICATE_CONVERTER, 5000),
            (ErrorCode.SERIALIZATION_NO_WORKERS, 6000),
            (ErrorCode.SEMANTIC_UNKNOWN_SYMBOL, 7000),
            (ErrorCode.INTERNAL_PLUGIN_LOAD_FAILED, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestDocGraphError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = DocGraphError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        # Given
        error = DocGraphError(code=ErrorCode.INTERNAL_PLUGIN_LOAD_FAILED, message="Something broke")

        # When
        result = str(error)

        # Then
        assert result == "[9002] INTERNAL_PLUGIN_LOAD_FAILED: Something broke"

    def test_given_subclass_error_when_raised_then_caught_as_base(self) -> None:
        """Every error family is catchable as DocGraphError."""
        # Given
        error = ConversionError.enum_value_missing("Red")

        # When / Then
        with pytest.raises(DocGraphError):
            raise error

    def test_given_error_when_reraised_through_context_manager_then_type_kept(self) -> None:
        """Context managers reassign __traceback__ while re-raising."""

        # Given
        @contextmanager
        def passthrough() -> Iterator[None]:
            yield

        # When / Then
        with pytest.raises(ConversionError) as exc_info:
            with passthrough():
                raise ConversionError.signature_unresolved("f")
        assert exc_info.value.code == ErrorCode.CONVERSION_SIGNATURE_UNRESOLVED

    def test_given_error_when_traceback_assigned_then_accepted(self) -> None:
        # Given
        error = SerializationError.no_workers("Widget")

        # When
        error.__traceback__ = None

        # Then
        assert error.__traceback__ is None

    def test_given_error_when_field_assigned_then_frozen(self) -> None:
        # Given
        error = ModelError.not_a_child("a", "b")

        # When / Then
        with pytest.raises(FrozenInstanceError):
            error.code = ErrorCode.MODEL_ALREADY_CONTAINED  # type: ignore[misc]

    def test_given_error_with_details_when_hashed_then_identity_based(self) -> None:
        # Given
        first = ConfigError.missing_required("serializer.out")
        second = ConfigError.missing_required("serializer.out")

        # When
        seen = {first, second}

        # Then
        assert len(seen) == 2


class TestConfigError:
    """ConfigError factory method tests."""

    @pytest.mark.parametrize(
        ("factory", "kwargs", "expected_code"),
        [
            ("parse_error", {"path": "/foo", "reason": "bad yaml"}, ErrorCode.CONFIG_PARSE_ERROR),
            (
                "invalid_value",
                {"field": "serializer.indent", "value": -1, "reason": "negative"},
                ErrorCode.CONFIG_INVALID_VALUE,
            ),
            ("missing_required", {"field": "serializer.out"}, ErrorCode.CONFIG_MISSING_REQUIRED),
            ("file_not_found", {"path": "/missing"}, ErrorCode.CONFIG_FILE_NOT_FOUND),
        ],
    )
    def test_given_factory_when_called_then_correct_code(
        self, factory: str, kwargs: dict[str, object], expected_code: ErrorCode
    ) -> None:
        """Factory methods produce errors with correct error codes."""
        # Given
        factory_method = getattr(ConfigError, factory)

        # When
        error = factory_method(**kwargs)

        # Then
        assert error.code == expected_code

    def test_given_parse_error_when_created_then_path_in_details(self) -> None:
        """Parse error includes file path in details."""
        # Given
        path = "/config.yaml"
        reason = "invalid syntax"

        # When
        error = ConfigError.parse_error(path, reason)

        # Then
        assert error.details["path"] == path
        assert reason in error.message


class TestConversionError:
    """ConversionError factories name the offending entity."""

    def test_given_parameter_undeclared_when_created_then_names_signature_and_parameter(self) -> None:
        # Given / When
        error = ConversionError.parameter_undeclared("greet", "who")

        # Then
        assert error.code == ErrorCode.CONVERSION_PARAMETER_UNDECLARED
        assert error.details == {"signature": "greet", "parameter": "who"}

    def test_given_not_in_progress_when_created_then_names_accessor(self) -> None:
        # Given / When
        error = ConversionError.not_in_progress("project")

        # Then
        assert error.code == ErrorCode.CONVERSION_NOT_IN_PROGRESS
        assert "project" in error.message


class TestRegistryAndModelErrors:
    """Registry and model factories."""

    def test_given_duplicate_converter_when_created_then_details_carry_kind(self) -> None:
        # Given / When
        error = RegistryError.duplicate_converter("reflection", "class")

        # Then
        assert error.code == ErrorCode.REGISTRY_DUPLICATE_CONVERTER
        assert error.details == {"registry": "reflection", "kind": "class"}

    def test_given_invalid_worker_order_when_created_then_message_names_minimum(self) -> None:
        # Given / When
        error = RegistryError.invalid_worker_order(-5, -1)

        # Then
        assert "-5" in error.message
        assert error.details["minimum"] == -1

    def test_given_invalid_kind_value_when_created_then_value_in_details(self) -> None:
        # Given / When
        error = ModelError.invalid_kind_value(3)

        # Then
        assert error.code == ErrorCode.MODEL_INVALID_KIND_VALUE
        assert error.details == {"value": 3}


class TestSerializationAndSemanticErrors:
    """Serialization and program-description factories."""

    def test_given_output_failed_when_created_then_reason_in_message(self) -> None:
        # Given / When
        error = SerializationError.output_failed("/out.json", "read-only")

        # Then
        assert error.code == ErrorCode.SERIALIZATION_OUTPUT_FAILED
        assert "read-only" in error.message

    def test_given_unknown_symbol_when_created_then_ref_in_details(self) -> None:
        # Given / When
        error = SemanticModelError.unknown_symbol("a.ts:Missing")

        # Then
        assert error.details == {"ref": "a.ts:Missing"}


class TestInternalError:
    """InternalError tests."""

    def test_given_plugin_load_failed_when_created_then_plugin_in_details(self) -> None:
        # Given / When
        error = InternalError.plugin_load_failed("pkg:Plugin", "no module named pkg")

        # Then
        assert error.code == ErrorCode.INTERNAL_PLUGIN_LOAD_FAILED
        assert error.details["plugin"] == "pkg:Plugin"
