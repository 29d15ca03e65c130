"""Default values shared across the engine."""

DEFAULT_STEP_TIMEOUT_MS = 30_000
DEFAULT_RETRY_DELAY_MS = 1_000
DEFAULT_BACKOFF_MULTIPLIER = 2
DEFAULT_MAX_ATTEMPTS = 1
DEFAULT_HISTORY_LIMIT = 100
DEFAULT_EVENT_HISTORY_SIZE = 10_000

EVENT_SOURCE = "workflow-engine"
EVENT_VERSION = 1
