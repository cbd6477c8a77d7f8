"""Tests for validation utility functions."""

import pytest
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from deflink.config.validator import flatten_pydantic_errors
from deflink.models.config import DefLinkConfig


class SampleModel(BaseModel):
    """Simple test model for validation testing."""

    name: str = Field(min_length=1)
    size: int = Field(ge=1)

    @field_validator("name")
    @classmethod
    def no_spaces(cls, v: str) -> str:
        if " " in v:
            raise ValueError("name cannot contain spaces")
        return v


@pytest.mark.unit
class TestFlattenPydanticErrors:
    """Tests for flatten_pydantic_errors() function."""

    def test_flatten_simple_error(self) -> None:
        """Test flattening a single field error."""
        with pytest.raises(PydanticValidationError) as exc_info:
            SampleModel(name="", size=1)
        result = flatten_pydantic_errors(exc_info.value)
        assert len(result) == 1
        assert result[0].startswith("Field 'name':")

    def test_flatten_multiple_errors(self) -> None:
        """Test that every failing field is reported."""
        with pytest.raises(PydanticValidationError) as exc_info:
            SampleModel(name="", size=0)
        result = flatten_pydantic_errors(exc_info.value)
        assert len(result) == 2
        assert all(isinstance(item, str) for item in result)

    def test_value_errors_include_input(self) -> None:
        """Test that custom validator failures show the received value."""
        with pytest.raises(PydanticValidationError) as exc_info:
            SampleModel(name="a b", size=1)
        result = flatten_pydantic_errors(exc_info.value)
        assert "name cannot contain spaces" in result[0]
        assert "(received: 'a b')" in result[0]

    def test_config_model_errors(self) -> None:
        """Test flattening errors from the configuration model."""
        with pytest.raises(PydanticValidationError) as exc_info:
            DefLinkConfig(cache_size=0)
        assert flatten_pydantic_errors(exc_info.value)[0].startswith(
            "Field 'cache_size':"
        )
