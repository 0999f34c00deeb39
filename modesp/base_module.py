"""Base contract shared by every system module."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum, IntEnum, auto
from typing import Any


class ModuleState(Enum):
    """Lifecycle states of a module, as tracked by the module manager."""

    CREATED = auto()
    CONFIGURED = auto()
    INITIALIZED = auto()
    RUNNING = auto()
    ERROR = auto()
    STOPPED = auto()


class ModuleType(IntEnum):
    """Execution priority of a module; lower values run first."""

    CRITICAL = 0
    HIGH = 1
    STANDARD = 2
    LOW = 3
    BACKGROUND = 4


class BaseModule(ABC):
    """A building block of the controller, driven from the main loop.

    Subclasses must provide ``name``, ``init``, ``update`` and ``stop``;
    the remaining hooks have sensible defaults.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique module name used for identification."""

    @abstractmethod
    def init(self) -> None:
        """Initialise the module after configuration; raise on failure."""

    @abstractmethod
    def update(self) -> None:
        """Advance the module's state; called from the main loop."""

    @abstractmethod
    def stop(self) -> None:
        """Stop the module and release its resources."""

    def configure(self, config: dict[str, Any]) -> None:
        """Apply the module's configuration section. Does nothing by default."""

    def is_healthy(self) -> bool:
        """Whether the module is functioning correctly."""
        return True

    def get_health_score(self) -> int:
        """Health score from 0 to 100, where 100 is perfect."""
        return 100

    def get_max_update_time_us(self) -> int:
        """Maximum time in microseconds that ``update`` should take."""
        return 2000

    def register_rpc(self, rpc: Any) -> None:
        """Register the module's RPC methods. Does nothing by default."""