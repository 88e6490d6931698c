# annotator/shared/resilience.py
import time
from enum import Enum
from typing import Any, Callable, Coroutine, Tuple, Type

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger()

# --- 1. Custom Exceptions ---

class ResilienceError(Exception):
    """Base class for resilience-related errors."""
    pass

class CircuitBreakerOpenError(ResilienceError):
    """Raised when a call is blocked because the Circuit Breaker is OPEN."""
    def __init__(self, service_name: str, reset_timeout: float):
        self.service_name = service_name
        self.reset_timeout = reset_timeout
        super().__init__(f"Circuit Breaker for {service_name} is OPEN. Retrying in {reset_timeout}s.")

# --- 2. Circuit Breaker ---

class CircuitState(str, Enum):
    CLOSED = "closed"       # Normal operation
    OPEN = "open"           # Failing, blocking requests
    HALF_OPEN = "half_open" # Testing recovery

class CircuitBreaker:
    """
    Implements the Circuit Breaker pattern.

    Each external data adapter owns one breaker, so a dead frequency or
    media service fails fast instead of stalling every annotation.
    """
    def __init__(self, name: str, failure_threshold: int = 5, recovery_timeout: int = 30):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.last_failure_time = 0.0

    async def a_call(self, func: Callable[..., Coroutine[Any, Any, Any]], *args, **kwargs) -> Any:
        """Awaits the coroutine function if the circuit is CLOSED or HALF-OPEN."""
        self._check_state()

        try:
            result = await func(*args, **kwargs)
        except Exception:
            self._handle_failure()
            raise

        self._handle_success()
        return result

    def _check_state(self):
        if self.state == CircuitState.OPEN:
            if time.time() - self.last_failure_time > self.recovery_timeout:
                self._transition_to(CircuitState.HALF_OPEN)
            else:
                raise CircuitBreakerOpenError(self.name, self.recovery_timeout)

    def _handle_success(self):
        if self.state == CircuitState.HALF_OPEN:
            self._reset()
        else:
            self.failure_count = 0

    def _handle_failure(self):
        self.failure_count += 1
        self.last_failure_time = time.time()

        if self.state == CircuitState.HALF_OPEN:
            self._transition_to(CircuitState.OPEN)
        elif self.failure_count >= self.failure_threshold:
            self._transition_to(CircuitState.OPEN)

    def _transition_to(self, new_state: CircuitState):
        self.state = new_state
        logger.warning("circuit_breaker_state_change",
                       service=self.name,
                       state=new_state.value,
                       failures=self.failure_count)

    def _reset(self):
        self.failure_count = 0
        self.state = CircuitState.CLOSED
        logger.info("circuit_breaker_recovered", service=self.name)

# --- 3. Retry Policies (Tenacity) ---

RETRYABLE_ERRORS: Tuple[Type[BaseException], ...] = (
    httpx.TransportError,
    TimeoutError,
    ConnectionError,
)

def external_call_retrying(attempts: int) -> AsyncRetrying:
    """
    Retry policy for external API calls (LLM, frequency, media).

    - Wait: Exponential backoff (0.5s, 1s, 2s...) capped at 5s.
    - Stop: After `attempts` tries.
    - Only network-level errors are retried; HTTP status errors are final.
    """
    return AsyncRetrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        reraise=True,
    )
