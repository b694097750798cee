"""Common type definitions for the metawhale system."""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ChainKind(str, Enum):
    """How balances are read from a network."""

    EVM = "evm"
    TRON = "tron"
    STUB = "stub"


class PriceSource(str, Enum):
    """Where a price record came from."""

    EXTERNAL_DETAILED = "external-detailed"
    EXTERNAL_SIMPLE = "external-simple"
    CACHED = "cached"
    FALLBACK = "fallback"


class TaskOutcome(str, Enum):
    """Terminal state of a scheduled task."""

    FULFILLED = "fulfilled"
    REJECTED = "rejected"
    TIMED_OUT = "timed_out"
    STOPPED = "stopped"
