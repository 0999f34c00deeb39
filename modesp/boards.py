"""Hardware layouts of the supported controller boards."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GpioOutputConfig:
    """A digital output on the board."""

    hal_id: str
    pin: int
    active_high: bool
    description: str


@dataclass(frozen=True)
class GpioInputConfig:
    """A digital input on the board."""

    hal_id: str
    pin: int
    pull_up: bool
    description: str


@dataclass(frozen=True)
class OneWireConfig:
    """A 1-Wire bus; ``power_pin`` is None when the bus has no power switch."""

    hal_id: str
    data_pin: int
    power_pin: int | None
    description: str


@dataclass(frozen=True)
class AdcConfig:
    """An ADC channel with its unit number and attenuation in dB."""

    hal_id: str
    unit: int
    channel: int
    attenuation_db: int
    description: str


@dataclass(frozen=True)
class BoardConfig:
    """Everything the hardware layer needs to know about one board."""

    name: str
    version: str
    gpio_outputs: tuple[GpioOutputConfig, ...]
    gpio_inputs: tuple[GpioInputConfig, ...]
    onewire_buses: tuple[OneWireConfig, ...]
    adc_channels: tuple[AdcConfig, ...]

    def info(self) -> str:
        """Board name and version, e.g. ``"Board v1.0"``."""
        return f"{self.name} v{self.version}"


REV_A_REFRIGERATOR = BoardConfig(
    name="Rev A Refrigerator Controller",
    version="1.0",
    gpio_outputs=(
        GpioOutputConfig("RELAY_COMPRESSOR", 4, True, "Main compressor relay"),
        GpioOutputConfig("RELAY_FAN", 5, True, "Evaporator fan relay"),
        GpioOutputConfig("RELAY_DEFROST", 18, True, "Defrost heater relay"),
        GpioOutputConfig("RELAY_LIGHTS", 19, True, "Internal lights relay"),
        GpioOutputConfig("LED_STATUS", 2, False, "Status LED (built-in)"),
        GpioOutputConfig("LED_ALARM", 21, False, "Alarm indicator LED"),
    ),
    gpio_inputs=(
        GpioInputConfig("INPUT_DOOR_SWITCH", 25, True, "Door open/close switch"),
        GpioInputConfig("INPUT_DEFROST_END", 26, True, "Defrost end switch"),
        GpioInputConfig("INPUT_EMERGENCY", 27, True, "Emergency stop button"),
    ),
    onewire_buses=(
        OneWireConfig("ONEWIRE_CHAMBER", 32, 33, "Chamber temperature sensors"),
        OneWireConfig("ONEWIRE_EVAPORATOR", 14, None, "Evaporator temperature sensors"),
    ),
    adc_channels=(
        AdcConfig("ADC_PRESSURE_HIGH", 1, 0, 11, "High pressure sensor"),
        AdcConfig("ADC_PRESSURE_LOW", 1, 1, 11, "Low pressure sensor"),
        AdcConfig("ADC_AMBIENT_TEMP", 1, 2, 11, "Ambient temperature (NTC)"),
        AdcConfig("ADC_SPARE_INPUT", 1, 3, 11, "Spare analog input"),
    ),
)

_BOARDS = {
    "rev_a_refrigerator": REV_A_REFRIGERATOR,
}


def select_board(name: str) -> BoardConfig:
    """Return the configuration of the named board type.

    Raises ValueError when the name is not a known board type.
    """
    try:
        return _BOARDS[name]
    except KeyError:
        known = ", ".join(sorted(_BOARDS))
        raise ValueError(
            f"Unknown board type {name!r}; choose one of: {known}"
        ) from None