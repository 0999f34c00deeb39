"""Relay output driver with minimum on/off time protection."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from modesp.actuator_driver import ActuatorDriver, ActuatorError, ActuatorStatus
from modesp.actuator_registry import register_actuator_driver
from modesp.esphal import ESPhal, ResourceNotFoundError
from modesp.hal import GpioOutput, HalError

_log = logging.getLogger(__name__)


def _monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


@dataclass
class _RelayConfig:
    hal_id: str = ""
    min_off_time_s: int = 0
    min_on_time_s: int = 0
    inrush_delay_ms: int = 0
    active_low: bool = False
    default_state: bool = False
    on_label: str = "ON"
    off_label: str = "OFF"


def _as_uint(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ActuatorError(f"'{key}' must be an integer, got {value!r}")
    result = int(value)
    if result < 0:
        raise ActuatorError(f"'{key}' must not be negative")
    return result


def _as_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ActuatorError(f"'{key}' must be a boolean, got {value!r}")
    return value


def _as_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ActuatorError(f"'{key}' must be a string, got {value!r}")
    return value


@register_actuator_driver("RELAY")
class RelayDriver(ActuatorDriver):
    """Binary on/off output with protection timers and state statistics."""

    def __init__(self, clock: Callable[[], int] | None = None,
                 sleep: Callable[[float], None] | None = None) -> None:
        self._clock = clock if clock is not None else _monotonic_ms
        self._sleep = sleep if sleep is not None else time.sleep
        self._config = _RelayConfig()
        self._gpio: GpioOutput | None = None
        self._current_state = False
        self._commanded_state = False
        self._last_change_time_ms = 0
        self._protection_end_time_ms = 0
        self._protection_active = False
        self._state_changes = 0
        self._protection_blocks = 0
        self._total_on_time_s = 0
        self._last_on_time_ms: int | None = None

    def init(self, hal: ESPhal, config: Mapping[str, Any]) -> None:
        _log.info("Initializing relay driver")
        if not isinstance(config, Mapping):
            raise ActuatorError("Relay configuration must be an object")
        if "hal_id" not in config:
            raise ActuatorError("Relay configuration requires 'hal_id'")
        cfg = _RelayConfig(
            hal_id=_as_str(config["hal_id"], "hal_id"),
            min_off_time_s=_as_uint(config.get("min_off_time_s", 0), "min_off_time_s"),
            min_on_time_s=_as_uint(config.get("min_on_time_s", 0), "min_on_time_s"),
            inrush_delay_ms=_as_uint(config.get("inrush_delay_ms", 0), "inrush_delay_ms"),
            active_low=_as_bool(config.get("active_low", False), "active_low"),
            default_state=_as_bool(config.get("default_state", False), "default_state"),
            on_label=_as_str(config.get("on_label", "ON"), "on_label"),
            off_label=_as_str(config.get("off_label", "OFF"), "off_label"),
        )
        self._config = cfg

        try:
            self._gpio = hal.get_gpio_output(cfg.hal_id)
        except ResourceNotFoundError as exc:
            raise ActuatorError(
                f"Failed to get GPIO output '{cfg.hal_id}': {exc}"
            ) from exc

        self._apply_state(cfg.default_state)
        self._commanded_state = cfg.default_state
        self._last_change_time_ms = self._clock()

        _log.info("Relay driver initialized: %s, default state: %s",
                  cfg.hal_id, self._label(cfg.default_state))

    def execute_command(self, command: Any) -> None:
        if isinstance(command, bool):
            new_state = command
        elif isinstance(command, (int, float)):
            new_state = int(command) != 0
        elif isinstance(command, Mapping) and "state" in command:
            new_state = _as_bool(command["state"], "state")
        else:
            raise ActuatorError("Invalid command format")

        self._commanded_state = new_state

        if not self._can_change_state(new_state):
            self._protection_blocks += 1
            _log.warning("State change blocked by protection timer")
            raise ActuatorError("State change blocked by protection timer")

        if new_state != self._current_state:
            self._apply_state(new_state)
            if new_state and self._config.inrush_delay_ms > 0:
                self._sleep(self._config.inrush_delay_ms / 1000.0)

    def get_status(self) -> ActuatorStatus:
        error_message = None
        if self._protection_active:
            now = self._clock()
            remaining_ms = max(0, self._protection_end_time_ms - now)
            error_message = (
                f"Protection timer active ({remaining_ms // 1000}s remaining)"
            )
        return ActuatorStatus(
            is_active=self._current_state,
            current_value=1.0 if self._current_state else 0.0,
            state_description=self._label(self._current_state),
            last_change_ms=self._last_change_time_ms,
            is_healthy=self._gpio is not None,
            error_message=error_message,
        )

    def update(self) -> None:
        if self._protection_active and self._clock() >= self._protection_end_time_ms:
            self._protection_active = False
            _log.info("Protection timer expired")
            if (self._commanded_state != self._current_state
                    and self._can_change_state(self._commanded_state)):
                self._apply_state(self._commanded_state)

        if self._current_state and self._last_on_time_ms is not None:
            now = self._clock()
            self._total_on_time_s += (now - self._last_on_time_ms) // 1000
            self._last_on_time_ms = now

    def get_type(self) -> str:
        return "RELAY"

    def get_description(self) -> str:
        return "Relay Output Driver"

    def is_available(self) -> bool:
        return self._gpio is not None

    def emergency_stop(self) -> None:
        _log.warning("Emergency stop activated")
        self._protection_active = False
        self._apply_state(False)
        self._commanded_state = False

    def get_config(self) -> dict[str, Any]:
        cfg = self._config
        return {
            "hal_id": cfg.hal_id,
            "min_off_time_s": cfg.min_off_time_s,
            "min_on_time_s": cfg.min_on_time_s,
            "inrush_delay_ms": cfg.inrush_delay_ms,
            "active_low": cfg.active_low,
            "default_state": cfg.default_state,
            "on_label": cfg.on_label,
            "off_label": cfg.off_label,
        }

    def set_config(self, config: Mapping[str, Any]) -> None:
        if not isinstance(config, Mapping):
            raise ActuatorError("Configuration update must be an object")
        updates = {
            key: _as_uint(config[key], key)
            for key in ("min_off_time_s", "min_on_time_s", "inrush_delay_ms")
            if key in config
        }
        for key, value in updates.items():
            setattr(self._config, key, value)

    def get_ui_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "Relay Settings",
            "properties": {
                "min_off_time_s": {
                    "type": "integer",
                    "title": "Minimum OFF Time (seconds)",
                    "description": "Minimum time relay must stay OFF",
                    "minimum": 0,
                    "maximum": 3600,
                    "default": 0,
                },
                "min_on_time_s": {
                    "type": "integer",
                    "title": "Minimum ON Time (seconds)",
                    "description": "Minimum time relay must stay ON",
                    "minimum": 0,
                    "maximum": 3600,
                    "default": 0,
                },
                "inrush_delay_ms": {
                    "type": "integer",
                    "title": "Inrush Delay (ms)",
                    "description": "Delay after turning ON for inrush current",
                    "minimum": 0,
                    "maximum": 5000,
                    "default": 0,
                },
            },
        }

    def get_diagnostics(self) -> dict[str, Any]:
        return {
            "current_state": self._current_state,
            "commanded_state": self._commanded_state,
            "state_label": self._label(self._current_state),
            "time_in_state_s": self._time_in_state_ms() // 1000,
            "state_changes": self._state_changes,
            "protection_blocks": self._protection_blocks,
            "protection_active": self._protection_active,
            "total_on_time_s": self._total_on_time_s,
            "hal_id": self._config.hal_id,
        }

    def _label(self, state: bool) -> str:
        return self._config.on_label if state else self._config.off_label

    def _time_in_state_ms(self) -> int:
        return self._clock() - self._last_change_time_ms

    def _can_change_state(self, new_state: bool) -> bool:
        if self._protection_active:
            return False
        time_in_state_s = self._time_in_state_ms() // 1000
        if self._current_state and not new_state:
            return time_in_state_s >= self._config.min_on_time_s
        if not self._current_state and new_state:
            return time_in_state_s >= self._config.min_off_time_s
        return True

    def _apply_state(self, state: bool) -> None:
        if self._gpio is None:
            return
        physical_state = not state if self._config.active_low else state
        try:
            self._gpio.set_state(physical_state)
        except HalError as exc:
            _log.error("Failed to set GPIO state: %s", exc)
            return

        if state == self._current_state:
            return
        self._current_state = state
        self._last_change_time_ms = self._clock()
        self._state_changes += 1

        hold_s = self._config.min_on_time_s if state else self._config.min_off_time_s
        if hold_s > 0:
            self._protection_active = True
            self._protection_end_time_ms = self._last_change_time_ms + hold_s * 1000

        if state:
            self._last_on_time_ms = self._last_change_time_ms
        elif self._last_on_time_ms is not None:
            self._total_on_time_s += (self._last_change_time_ms - self._last_on_time_ms) // 1000
            self._last_on_time_ms = None

        _log.info("Relay state changed to: %s", self._label(state))