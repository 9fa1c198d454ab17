"""Tests for public exceptions."""

import pytest

from insta_sdk.exceptions import (
    BackReferenceReleasedError,
    DecodeError,
    InstaAPIError,
    InstaConfigError,
    InstaError,
    InstaValidationError,
    InvalidResponseError,
    InvalidURLError,
)


class TestInstaError:
    """Tests for base InstaError."""

    def test_is_exception(self):
        """InstaError should be an Exception."""
        assert issubclass(InstaError, Exception)

    def test_can_be_raised(self):
        """InstaError should be raisable with message."""
        with pytest.raises(InstaError) as exc_info:
            raise InstaError("test error")
        assert str(exc_info.value) == "test error"


class TestInstaAPIError:
    """Tests for InstaAPIError."""

    def test_with_message_only(self):
        """Should create error with message only."""
        error = InstaAPIError("API request failed")
        assert str(error) == "API request failed"
        assert error.status_code is None

    def test_with_status_code(self):
        """Should store status code."""
        error = InstaAPIError("Not found", status_code=404)
        assert error.status_code == 404


class TestInvalidResponseError:
    """Tests for InvalidResponseError."""

    def test_is_api_error(self):
        """Should be catchable as InstaAPIError."""
        with pytest.raises(InstaAPIError):
            raise InvalidResponseError(status_code=500)

    def test_default_message(self):
        """Should carry a generic message and the status code."""
        error = InvalidResponseError(status_code=403)
        assert str(error) == "Invalid response."
        assert error.status_code == 403


class TestDispatchErrors:
    """Tests for dispatch-level errors."""

    def test_back_reference_released(self):
        """Should describe the released reference."""
        error = BackReferenceReleasedError()
        assert isinstance(error, InstaError)
        assert "released" in str(error)

    def test_invalid_url(self):
        """Should keep the offending URL source."""
        error = InvalidURLError(url="not a url")
        assert isinstance(error, InstaError)
        assert str(error) == "Invalid URL."
        assert error.url == "not a url"

    def test_decode_error_is_validation_error(self):
        """DecodeError should inherit from InstaValidationError."""
        assert issubclass(DecodeError, InstaValidationError)

    def test_config_error(self):
        """InstaConfigError should inherit from InstaError."""
        assert issubclass(InstaConfigError, InstaError)
