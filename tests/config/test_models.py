"""Tests for configuration models and constants."""

import pytest
from pydantic import ValidationError

from docgraph.config.constants import BASE_WORKER_ORDER, DEFAULT_SORT_ORDER
from docgraph.config.models import (
    ConverterConfig,
    DocGraphConfig,
    LogOutputConfig,
    SerializerConfig,
)
from docgraph.models.kinds import kind_from_string


class TestConverterConfig:
    """Conversion settings."""

    def test_given_defaults_when_created_then_default_sort_order(self) -> None:
        # When
        config = ConverterConfig()

        # Then
        assert config.sort_order == list(DEFAULT_SORT_ORDER)
        assert config.strip_internal is False
        assert config.plugins == []

    def test_given_tags_with_prefix_when_created_then_prefix_stripped_and_lowered(self) -> None:
        # When
        config = ConverterConfig(exclude_tags=["@Beta", "alpha"])

        # Then
        assert config.exclude_tags == ["beta", "alpha"]

    def test_given_unknown_sort_strategy_when_created_then_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ConverterConfig(sort="random")  # type: ignore[arg-type]


class TestSerializerConfig:
    """JSON output settings."""

    @pytest.mark.parametrize("indent", [0, 2, None])
    def test_given_valid_indent_when_created_then_accepted(self, indent: int | None) -> None:
        assert SerializerConfig(indent=indent).indent == indent

    def test_given_negative_indent_when_created_then_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SerializerConfig(indent=-1)


class TestLogOutputConfig:
    """Log destinations."""

    def test_given_relative_file_when_created_then_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/out.log")

    def test_given_console_destination_when_created_then_kept(self) -> None:
        assert LogOutputConfig(destination="stdout").destination == "stdout"


class TestConstants:
    """Non-configurable values."""

    def test_given_default_sort_order_when_parsed_then_every_name_is_a_kind(self) -> None:
        # Then
        assert all(kind_from_string(name) is not None for name in DEFAULT_SORT_ORDER)

    def test_given_base_worker_order_when_compared_then_below_default_worker_order(self) -> None:
        assert BASE_WORKER_ORDER < 0

    def test_given_root_config_when_created_then_all_sections_present(self) -> None:
        config = DocGraphConfig()

        assert config.logging.level == "INFO"
        assert config.converter.name == ""
        assert config.serializer.out == ""
