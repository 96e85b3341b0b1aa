"""
Error Recovery - handling of transient and permanent failures.

Provides:
- Error classification (transient vs permanent vs hardware)
- Retry logic with exponential backoff
- Circuit breaker for a device that keeps failing
- Specific exception types for the failure modes of the engine
"""

import random
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional, TypeVar


class ErrorType(Enum):
    """Classification of error types."""
    TRANSIENT = "transient"  # Temporary, should retry
    PERMANENT = "permanent"  # Persistent, don't retry
    HARDWARE = "hardware"    # Output device failure, may recover
    CONFIG = "config"        # Configuration error, permanent


@dataclass
class RetryConfig:
    """Configuration for retry logic."""
    max_attempts: int = 3
    initial_delay: float = 0.1  # seconds
    max_delay: float = 5.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = True


@dataclass
class CircuitBreakerState:
    """State for circuit breaker pattern."""
    failures: int = 0
    last_failure_time: Optional[datetime] = None
    state: str = "closed"  # closed, open, half_open
    failure_threshold: int = 5
    timeout: timedelta = field(default_factory=lambda: timedelta(seconds=10))


T = TypeVar('T')


class TransientError(Exception):
    """Transient error that should be retried."""
    pass


class PermanentError(Exception):
    """Permanent error that should not be retried."""
    pass


class HardwareError(Exception):
    """Output device error."""
    pass


class GeometryError(PermanentError):
    """Pixel table cannot be used (no active pixels, malformed entries)."""
    pass


class ConfigError(PermanentError):
    """Configuration values are unusable."""
    pass


class CircuitOpenError(TransientError):
    """Raised instead of calling through an open circuit."""
    pass


def classify_error(error: Exception) -> ErrorType:
    """
    Classify an exception into an error type.

    Explicit exception classes win; otherwise the message is matched
    against device and configuration keywords.
    """
    if isinstance(error, (GeometryError, ConfigError)):
        return ErrorType.CONFIG
    if isinstance(error, PermanentError):
        return ErrorType.PERMANENT
    if isinstance(error, HardwareError):
        return ErrorType.HARDWARE
    if isinstance(error, TransientError):
        return ErrorType.TRANSIENT

    error_str = str(error).lower()

    if any(x in error_str for x in ['spi', 'gpio', 'usb', 'device', 'hardware', 'i/o']):
        return ErrorType.HARDWARE

    if any(x in error_str for x in ['config', 'invalid', 'missing']):
        return ErrorType.CONFIG

    return ErrorType.TRANSIENT


def retry_with_backoff(
    func: Callable[[], T],
    config: Optional[RetryConfig] = None,
    error_filter: Optional[Callable[[Exception], bool]] = None
) -> T:
    """
    Retry a function with exponential backoff.

    Args:
        func: Function to retry (no arguments)
        config: Retry configuration
        error_filter: Optional function to filter which errors to retry

    Returns:
        Function result

    Raises:
        Last exception if all retries fail
    """
    if config is None:
        config = RetryConfig()

    last_error = None

    for attempt in range(config.max_attempts):
        try:
            return func()
        except Exception as e:
            last_error = e

            if error_filter and not error_filter(e):
                raise

            error_type = classify_error(e)
            if error_type == ErrorType.PERMANENT or error_type == ErrorType.CONFIG:
                raise

            if attempt == config.max_attempts - 1:
                break

            delay = min(
                config.initial_delay * (config.exponential_base ** attempt),
                config.max_delay
            )
            if config.jitter:
                delay = delay * (0.5 + random.random() * 0.5)

            time.sleep(delay)

    raise last_error


class CircuitBreaker:
    """
    Circuit breaker for a collaborator that keeps failing.

    States:
    - closed: Normal operation, calls pass through
    - open: Too many failures, calls fail immediately
    - half_open: Timeout elapsed, next call is a trial
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        timeout: timedelta = timedelta(seconds=10),
    ):
        self.state = CircuitBreakerState(
            failure_threshold=failure_threshold,
            timeout=timeout,
        )

    def call(self, func: Callable[[], T]) -> T:
        """
        Execute function through circuit breaker.

        Raises:
            CircuitOpenError if the circuit is open, otherwise whatever func raises
        """
        if self.state.state == "open":
            if (self.state.last_failure_time and
                    datetime.now() - self.state.last_failure_time > self.state.timeout):
                self.state.state = "half_open"
            else:
                raise CircuitOpenError("Circuit breaker is open")

        try:
            result = func()
        except Exception:
            self.state.failures += 1
            self.state.last_failure_time = datetime.now()
            if self.state.state == "half_open" or self.state.failures >= self.state.failure_threshold:
                self.state.state = "open"
            raise

        self.state.state = "closed"
        self.state.failures = 0
        return result

    def reset(self):
        """Reset circuit breaker to closed state."""
        self.state.state = "closed"
        self.state.failures = 0
        self.state.last_failure_time = None

    def is_open(self) -> bool:
        return self.state.state == "open"
