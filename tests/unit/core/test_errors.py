"""
Tests unitaires pour la taxonomie des erreurs.

Verifie le caractere retryable, les delais par defaut et les messages
utilisateur de chaque variante.
"""

import pytest

from arrlink.core.backends import BackendKind
from arrlink.core.errors import (
    ApiError,
    ApiValidationError,
    AuthenticationError,
    CircuitOpenError,
    DeadlineExceededError,
    ErrorKind,
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
)


class TestRetryability:
    """Le caractere retryable depend uniquement de la variante."""

    @pytest.mark.parametrize(
        "error, retryable",
        [
            (AuthenticationError("x"), False),
            (ApiValidationError("x"), False),
            (MalformedResponseError("x"), False),
            (RateLimitError("x"), True),
            (ServiceUnavailableError("x", status_code=503), True),
            (NotFoundError("x"), True),
            (NetworkError("x", code="ECONNRESET"), True),
            (CircuitOpenError("x", status_code=503), False),
        ],
    )
    def test_is_retryable(self, error: ApiError, retryable: bool) -> None:
        assert error.is_retryable is retryable

    def test_non_retryable_has_no_delay(self) -> None:
        assert AuthenticationError("x").retry_delay is None
        assert CircuitOpenError("x").retry_delay is None


class TestRetryDelays:
    """Delais par defaut de chaque variante."""

    @pytest.mark.parametrize(
        "status, delay", [(500, 5.0), (502, 10.0), (503, 15.0), (504, 20.0), (599, 10.0)]
    )
    def test_service_unavailable_delay_by_status(self, status: int, delay: float) -> None:
        assert ServiceUnavailableError("x", status_code=status).retry_delay == delay

    def test_rate_limit_uses_retry_after(self) -> None:
        assert RateLimitError("x", retry_after=12).retry_delay == 12

    def test_rate_limit_defaults_to_30_seconds(self) -> None:
        assert RateLimitError("x").retry_delay == 30.0

    @pytest.mark.parametrize(
        "code, delay",
        [("ECONNREFUSED", 30.0), ("ENOTFOUND", 30.0), ("ETIMEDOUT", 10.0), ("ECONNRESET", 15.0)],
    )
    def test_network_delay_by_code(self, code: str, delay: float) -> None:
        assert NetworkError("x", code=code).retry_delay == delay

    def test_not_found_delay(self) -> None:
        assert NotFoundError("x").retry_delay == 2.0


class TestUserMessages:
    """Les messages utilisateur ne mentionnent jamais le nom technique du backend."""

    def test_authentication_message(self) -> None:
        error = AuthenticationError("HTTP 401", service=BackendKind.SONARR)
        message = error.user_message()
        assert "TV Show service authentication failed" in message
        assert "sonarr" not in message.lower()

    def test_rate_limit_message_includes_seconds(self) -> None:
        error = RateLimitError("x", retry_after=1, service=BackendKind.RADARR)
        assert error.user_message() == "Movie service is busy. Please try again in 1 second."

    def test_not_found_message_includes_resource_type(self) -> None:
        error = NotFoundError("x", resource_type="Series", service=BackendKind.SONARR)
        assert error.user_message().startswith("Series not found in TV Show service")

    def test_network_message_for_refused_connection(self) -> None:
        error = NetworkError("x", code="ECONNREFUSED", service=BackendKind.EMBY)
        assert "Cannot connect to Media library" in error.user_message()

    def test_unknown_service_name(self) -> None:
        assert ServiceUnavailableError("x").service_name == "Media service"

    def test_deadline_message(self) -> None:
        error = DeadlineExceededError(30)
        assert "30s" in str(error)
        assert "took too long" in error.user_message()


class TestErrorKinds:
    def test_circuit_open_is_service_unavailable(self) -> None:
        error = CircuitOpenError("x")
        assert isinstance(error, ServiceUnavailableError)
        assert error.kind is ErrorKind.SERVICE_UNAVAILABLE

    def test_repr_mentions_status(self) -> None:
        error = NotFoundError("missing", status_code=404)
        assert "status_code=404" in repr(error)
