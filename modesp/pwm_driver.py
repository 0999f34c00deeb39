"""PWM output driver with ramping, duty limits and gamma correction."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from modesp.actuator_driver import ActuatorDriver, ActuatorError, ActuatorStatus
from modesp.actuator_registry import register_actuator_driver
from modesp.esphal import ESPhal
from modesp.hal import HalError

_log = logging.getLogger(__name__)

LEDC_CHANNEL_MAX = 8
LEDC_TIMER_MAX = 4


def _monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


@dataclass
class _LedcChannel:
    timer: int
    gpio_num: int
    frequency: int
    resolution_bits: int
    invert: bool
    duty: int = 0


class LedcController:
    """In-memory model of the LED PWM controller: allocation and duty registers."""

    def __init__(self) -> None:
        self._allocated = 0
        self._channels: dict[int, _LedcChannel] = {}

    def allocate(self) -> tuple[int, int]:
        """Hand out the next (channel, timer) pair, wrapping around."""
        channel = self._allocated % LEDC_CHANNEL_MAX
        timer = (self._allocated // LEDC_CHANNEL_MAX) % LEDC_TIMER_MAX
        self._allocated += 1
        return channel, timer

    def configure(self, channel: int, timer: int, gpio_num: int, frequency: int,
                  resolution_bits: int, invert: bool) -> None:
        """Set up a channel and its timer; raise HalError on invalid settings."""
        if not 0 <= channel < LEDC_CHANNEL_MAX:
            raise HalError(f"Invalid LEDC channel {channel}")
        if not 0 <= timer < LEDC_TIMER_MAX:
            raise HalError(f"Invalid LEDC timer {timer}")
        if gpio_num < 0:
            raise HalError(f"Invalid GPIO {gpio_num}")
        if frequency <= 0:
            raise HalError(f"Invalid PWM frequency {frequency}")
        if not 1 <= resolution_bits <= 15:
            raise HalError(f"Invalid duty resolution {resolution_bits}")
        self._channels[channel] = _LedcChannel(
            timer, gpio_num, frequency, resolution_bits, invert
        )

    def _channel(self, channel: int) -> _LedcChannel:
        try:
            return self._channels[channel]
        except KeyError:
            raise HalError(f"LEDC channel {channel} is not configured") from None

    def set_duty(self, channel: int, duty: int) -> None:
        """Load a raw duty value; raise HalError if it does not fit."""
        state = self._channel(channel)
        max_duty = (1 << state.resolution_bits) - 1
        if not 0 <= duty <= max_duty:
            raise HalError(f"Duty {duty} out of range 0..{max_duty}")
        state.duty = duty

    def get_duty(self, channel: int) -> int:
        """Raw duty value currently loaded on a channel."""
        return self._channel(channel).duty

    def stop(self, channel: int) -> None:
        """Stop output on a channel, leaving it idle."""
        self._channel(channel).duty = 0


_DEFAULT_LEDC = LedcController()


@dataclass
class _PwmConfig:
    gpio_num: int = -1
    frequency: int = 5000
    resolution_bits: int = 10
    min_duty_percent: float = 0.0
    max_duty_percent: float = 100.0
    ramp_time_ms: int = 0
    gamma: float = 1.0
    invert: bool = False
    default_duty: float = 0.0


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ActuatorError(f"'{key}' must be a number, got {value!r}")
    return float(value)


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ActuatorError(f"'{key}' must be an integer, got {value!r}")
    return int(value)


def _as_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ActuatorError(f"'{key}' must be a boolean, got {value!r}")
    return value


@register_actuator_driver("PWM")
class PwmDriver(ActuatorDriver):
    """Variable duty-cycle output with soft start/stop and gamma correction."""

    def __init__(self, ledc: LedcController | None = None,
                 clock: Callable[[], int] | None = None) -> None:
        self._ledc = ledc if ledc is not None else _DEFAULT_LEDC
        self._clock = clock if clock is not None else _monotonic_ms
        self._config = _PwmConfig()
        self._initialized = False
        self._channel = 0
        self._timer = 0
        self._current_duty = 0.0
        self._target_duty = 0.0
        self._ramp_start_time = 0
        self._ramp_start_duty = 0.0
        self._ramping = False
        self._command_count = 0
        self._total_on_time_ms = 0
        self._last_on_time: int | None = None

    def init(self, hal: ESPhal, config: Mapping[str, Any]) -> None:
        _log.info("Initializing PWM driver")
        if not isinstance(config, Mapping):
            raise ActuatorError("PWM configuration must be an object")
        if "gpio_num" not in config:
            raise ActuatorError("PWM configuration requires 'gpio_num'")
        cfg = _PwmConfig(
            gpio_num=_as_int(config["gpio_num"], "gpio_num"),
            frequency=_as_int(config.get("frequency", 5000), "frequency"),
            resolution_bits=_as_int(config.get("resolution_bits", 10), "resolution_bits"),
            min_duty_percent=_as_float(config.get("min_duty_percent", 0.0), "min_duty_percent"),
            max_duty_percent=_as_float(config.get("max_duty_percent", 100.0), "max_duty_percent"),
            ramp_time_ms=_as_int(config.get("ramp_time_ms", 0), "ramp_time_ms"),
            gamma=_as_float(config.get("gamma", 1.0), "gamma"),
            invert=_as_bool(config.get("invert", False), "invert"),
            default_duty=_as_float(config.get("default_duty", 0.0), "default_duty"),
        )
        if not 1 <= cfg.resolution_bits <= 15:
            raise ActuatorError(f"Invalid resolution: {cfg.resolution_bits}")
        self._config = cfg

        self._channel, self._timer = self._ledc.allocate()
        try:
            self._ledc.configure(self._channel, self._timer, cfg.gpio_num,
                                 cfg.frequency, cfg.resolution_bits, cfg.invert)
        except HalError as exc:
            raise ActuatorError(f"Failed to configure PWM: {exc}") from exc

        # Applied before the driver counts as initialised, so the output
        # stays off; only the target remembers the default.
        self._set_duty_immediate(cfg.default_duty)
        self._target_duty = cfg.default_duty

        self._initialized = True
        _log.info("PWM driver initialized on GPIO %d", cfg.gpio_num)

    def execute_command(self, command: Any) -> None:
        if isinstance(command, bool):
            raise ActuatorError("Invalid command format")
        if isinstance(command, (int, float)):
            new_duty = float(command)
        elif isinstance(command, Mapping) and "duty" in command:
            new_duty = _as_float(command["duty"], "duty")
        else:
            raise ActuatorError("Invalid command format")

        cfg = self._config
        new_duty = max(cfg.min_duty_percent, min(cfg.max_duty_percent, new_duty))
        self._target_duty = new_duty
        self._command_count += 1

        if cfg.ramp_time_ms > 0 and abs(new_duty - self._current_duty) > 0.1:
            self._start_ramp()
        else:
            self._set_duty_immediate(new_duty)

    def update(self) -> None:
        if self._ramping:
            self._update_ramp()
        if self._current_duty > 0.0 and self._last_on_time is not None:
            now = self._clock()
            self._total_on_time_ms += now - self._last_on_time
            self._last_on_time = now

    def get_status(self) -> ActuatorStatus:
        description = f"{int(self._current_duty)}%"
        if self._ramping:
            description += f" (ramping to {int(self._target_duty)}%)"
        return ActuatorStatus(
            is_active=self._current_duty > 0.0,
            current_value=self._current_duty,
            state_description=description,
            last_change_ms=int(self._ramp_start_time),
            is_healthy=self._initialized,
        )

    def get_type(self) -> str:
        return "PWM"

    def get_description(self) -> str:
        return "PWM Output Driver"

    def is_available(self) -> bool:
        return self._initialized

    def emergency_stop(self) -> None:
        _log.warning("Emergency stop activated")
        self._ramping = False
        self._set_duty_immediate(0.0)
        self._target_duty = 0.0

    def get_config(self) -> dict[str, Any]:
        cfg = self._config
        return {
            "gpio_num": cfg.gpio_num,
            "frequency": cfg.frequency,
            "resolution_bits": cfg.resolution_bits,
            "min_duty_percent": cfg.min_duty_percent,
            "max_duty_percent": cfg.max_duty_percent,
            "ramp_time_ms": cfg.ramp_time_ms,
            "gamma": cfg.gamma,
            "invert": cfg.invert,
        }

    def set_config(self, config: Mapping[str, Any]) -> None:
        if not isinstance(config, Mapping):
            raise ActuatorError("Configuration update must be an object")
        updates: dict[str, Any] = {}
        if "min_duty_percent" in config:
            updates["min_duty_percent"] = _as_float(config["min_duty_percent"], "min_duty_percent")
        if "max_duty_percent" in config:
            updates["max_duty_percent"] = _as_float(config["max_duty_percent"], "max_duty_percent")
        if "ramp_time_ms" in config:
            ramp = _as_int(config["ramp_time_ms"], "ramp_time_ms")
            if ramp < 0:
                raise ActuatorError("'ramp_time_ms' must not be negative")
            updates["ramp_time_ms"] = ramp
        if "gamma" in config:
            updates["gamma"] = _as_float(config["gamma"], "gamma")
        for key, value in updates.items():
            setattr(self._config, key, value)

    def get_ui_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "title": "PWM Output Settings",
            "properties": {
                "duty_limits": {
                    "type": "object",
                    "title": "Duty Cycle Limits",
                    "properties": {
                        "min": {
                            "type": "number",
                            "title": "Minimum Duty (%)",
                            "minimum": 0,
                            "maximum": 100,
                            "default": 0,
                        },
                        "max": {
                            "type": "number",
                            "title": "Maximum Duty (%)",
                            "minimum": 0,
                            "maximum": 100,
                            "default": 100,
                        },
                    },
                },
                "ramp_time_ms": {
                    "type": "integer",
                    "title": "Ramp Time (ms)",
                    "description": "Soft start/stop duration",
                    "minimum": 0,
                    "maximum": 10000,
                    "default": 0,
                },
                "gamma": {
                    "type": "number",
                    "title": "Gamma Correction",
                    "description": "For LED dimming (1.0 = linear)",
                    "minimum": 0.1,
                    "maximum": 5.0,
                    "default": 1.0,
                    "ui:widget": "slider",
                    "ui:step": 0.1,
                },
            },
        }

    def get_diagnostics(self) -> dict[str, Any]:
        return {
            "current_duty": self._current_duty,
            "target_duty": self._target_duty,
            "ramping": self._ramping,
            "command_count": self._command_count,
            "total_on_time_ms": self._total_on_time_ms,
            "gpio_num": self._config.gpio_num,
            "frequency": self._config.frequency,
            "channel": self._channel,
            "timer": self._timer,
        }

    def close(self) -> None:
        """Stop the PWM output; the driver is no longer available afterwards."""
        if self._initialized:
            self._ledc.stop(self._channel)
            self._initialized = False

    def __enter__(self) -> PwmDriver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _set_duty_immediate(self, duty_percent: float) -> None:
        if not self._initialized:
            return
        corrected = self._apply_gamma(duty_percent / 100.0) * 100.0
        raw = self._percent_to_duty(corrected)
        try:
            self._ledc.set_duty(self._channel, raw)
        except HalError as exc:
            _log.error("Failed to set PWM duty: %s", exc)
            return
        self._current_duty = duty_percent

        if duty_percent > 0.0 and self._last_on_time is None:
            self._last_on_time = self._clock()
        elif duty_percent == 0.0 and self._last_on_time is not None:
            self._total_on_time_ms += self._clock() - self._last_on_time
            self._last_on_time = None

    def _start_ramp(self) -> None:
        self._ramp_start_time = self._clock()
        self._ramp_start_duty = self._current_duty
        self._ramping = True

    def _update_ramp(self) -> None:
        elapsed = self._clock() - self._ramp_start_time
        ramp_time = self._config.ramp_time_ms
        if elapsed >= ramp_time:
            self._set_duty_immediate(self._target_duty)
            self._ramping = False
        else:
            progress = elapsed / ramp_time
            duty = self._ramp_start_duty + (self._target_duty - self._ramp_start_duty) * progress
            self._set_duty_immediate(duty)

    def _percent_to_duty(self, percent: float) -> int:
        max_duty = (1 << self._config.resolution_bits) - 1
        return int((percent / 100.0) * max_duty)

    def _apply_gamma(self, linear_value: float) -> float:
        if self._config.gamma == 1.0:
            return linear_value
        return linear_value ** self._config.gamma