"""Contract that every actuator driver implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from modesp.esphal import ESPhal


class ActuatorError(Exception):
    """Raised when an actuator cannot be configured or cannot obey a command."""


@dataclass
class ActuatorStatus:
    """Snapshot of an actuator's state, as published to shared state."""

    is_active: bool
    current_value: float
    state_description: str
    last_change_ms: int
    is_healthy: bool
    error_message: str | None = None

    def to_json(self) -> dict[str, Any]:
        """JSON-ready representation; ``error`` appears only when set."""
        data: dict[str, Any] = {
            "is_active": self.is_active,
            "current_value": self.current_value,
            "state": self.state_description,
            "last_change_ms": self.last_change_ms,
            "is_healthy": self.is_healthy,
        }
        if self.error_message is not None:
            data["error"] = self.error_message
        return data


class ActuatorDriver(ABC):
    """A self-contained driver for one kind of actuator.

    Drivers own their hardware control, command parsing, timing
    constraints, configuration and UI schema.
    """

    @abstractmethod
    def init(self, hal: ESPhal, config: dict[str, Any]) -> None:
        """Set the driver up from its configuration; raise ActuatorError on failure."""

    @abstractmethod
    def execute_command(self, command: Any) -> None:
        """Carry out a command (bool, number or object); raise ActuatorError if refused."""

    @abstractmethod
    def get_status(self) -> ActuatorStatus:
        """Current status of the actuator."""

    @abstractmethod
    def get_type(self) -> str:
        """Driver type identifier such as ``"RELAY"`` or ``"PWM"``."""

    @abstractmethod
    def get_description(self) -> str:
        """Human-readable description of the driver."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the actuator can accept commands."""

    @abstractmethod
    def get_config(self) -> dict[str, Any]:
        """All configuration parameters of the driver."""

    @abstractmethod
    def set_config(self, config: dict[str, Any]) -> None:
        """Change configuration at runtime; raise ActuatorError on bad values."""

    @abstractmethod
    def get_ui_schema(self) -> dict[str, Any]:
        """JSON schema describing the configurable parameters for a UI."""

    @abstractmethod
    def emergency_stop(self) -> None:
        """Move the actuator to its safe state immediately."""

    def get_diagnostics(self) -> dict[str, Any]:
        """Driver-specific diagnostic data; empty by default."""
        return {}

    def update(self) -> None:
        """Periodic hook for time-based behaviour. Does nothing by default."""