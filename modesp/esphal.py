"""Hardware abstraction layer: owns the drivers for a board's resources."""

from __future__ import annotations

import logging
from typing import TypeVar

from modesp.boards import BoardConfig, select_board
from modesp.hal import AdcChannel, GpioInput, GpioOutput, OneWireBus

_log = logging.getLogger(__name__)

_T = TypeVar("_T")

_DEFAULT_BOARD = "rev_a_refrigerator"


class ResourceNotFoundError(LookupError):
    """Raised when a hardware id is not known to the HAL."""


class _ResourceKind:
    def __init__(self, label: str, interface: type, configured_ids: set[str]):
        self.label = label
        self.interface = interface
        self.configured_ids = configured_ids
        self.drivers: dict[str, object] = {}

    def not_found(self, hal_id: str) -> ResourceNotFoundError:
        return ResourceNotFoundError(
            f"{self.label} '{hal_id}' not found. Check board configuration."
        )

    def attach(self, hal_id: str, driver: object) -> None:
        if hal_id not in self.configured_ids:
            raise self.not_found(hal_id)
        if not isinstance(driver, self.interface):
            raise TypeError(
                f"{self.label} driver must implement {self.interface.__name__}"
            )
        self.drivers[hal_id] = driver

    def get(self, hal_id: str):
        try:
            return self.drivers[hal_id]
        except KeyError:
            raise self.not_found(hal_id) from None

    def __contains__(self, hal_id: str) -> bool:
        return hal_id in self.drivers


class ESPhal:
    """Gives modules access to a board's hardware by hardware id.

    Drivers are attached per hardware id; only ids present in the board
    configuration can be attached.
    """

    def __init__(self, board: BoardConfig | None = None):
        self.board = board if board is not None else select_board(_DEFAULT_BOARD)
        self._initialized = False
        self._outputs = _ResourceKind(
            "GPIO output", GpioOutput, {c.hal_id for c in self.board.gpio_outputs}
        )
        self._inputs = _ResourceKind(
            "GPIO input", GpioInput, {c.hal_id for c in self.board.gpio_inputs}
        )
        self._buses = _ResourceKind(
            "OneWire bus", OneWireBus, {c.hal_id for c in self.board.onewire_buses}
        )
        self._adcs = _ResourceKind(
            "ADC channel", AdcChannel, {c.hal_id for c in self.board.adc_channels}
        )

    @property
    def initialized(self) -> bool:
        """Whether ``init`` has completed."""
        return self._initialized

    def init(self) -> None:
        """Bring up all hardware described by the board configuration."""
        if self._initialized:
            _log.warning("ESPhal already initialized")
            return
        _log.info("Initializing ESPhal for %s", self.board.name)

        for c in self.board.gpio_outputs:
            _log.debug("GPIO output %s - pin %d, active %s",
                       c.hal_id, c.pin, "HIGH" if c.active_high else "LOW")
        for c in self.board.gpio_inputs:
            _log.debug("GPIO input %s - pin %d, pull-up %s",
                       c.hal_id, c.pin, "YES" if c.pull_up else "NO")
        for c in self.board.onewire_buses:
            _log.debug("OneWire bus %s - data pin %d, power pin %d",
                       c.hal_id, c.data_pin, -1 if c.power_pin is None else c.power_pin)
        for c in self.board.adc_channels:
            _log.debug("ADC channel %s - unit %d, channel %d, atten %d dB",
                       c.hal_id, c.unit, c.channel, c.attenuation_db)

        self._initialized = True
        _log.info(
            "ESPhal initialized: %d GPIO outputs, %d GPIO inputs, "
            "%d OneWire buses, %d ADC channels",
            len(self._outputs.drivers), len(self._inputs.drivers),
            len(self._buses.drivers), len(self._adcs.drivers),
        )

    def attach_gpio_output(self, hal_id: str, driver: GpioOutput) -> None:
        """Install the driver for a configured GPIO output."""
        self._outputs.attach(hal_id, driver)

    def attach_gpio_input(self, hal_id: str, driver: GpioInput) -> None:
        """Install the driver for a configured GPIO input."""
        self._inputs.attach(hal_id, driver)

    def attach_onewire_bus(self, hal_id: str, driver: OneWireBus) -> None:
        """Install the driver for a configured OneWire bus."""
        self._buses.attach(hal_id, driver)

    def attach_adc_channel(self, hal_id: str, driver: AdcChannel) -> None:
        """Install the driver for a configured ADC channel."""
        self._adcs.attach(hal_id, driver)

    def get_gpio_output(self, hal_id: str) -> GpioOutput:
        """Driver of a GPIO output; raise ResourceNotFoundError if absent."""
        return self._outputs.get(hal_id)

    def get_gpio_input(self, hal_id: str) -> GpioInput:
        """Driver of a GPIO input; raise ResourceNotFoundError if absent."""
        return self._inputs.get(hal_id)

    def get_onewire_bus(self, hal_id: str) -> OneWireBus:
        """Driver of a OneWire bus; raise ResourceNotFoundError if absent."""
        return self._buses.get(hal_id)

    def get_adc_channel(self, hal_id: str) -> AdcChannel:
        """Driver of an ADC channel; raise ResourceNotFoundError if absent."""
        return self._adcs.get(hal_id)

    def has_gpio_output(self, hal_id: str) -> bool:
        return hal_id in self._outputs

    def has_gpio_input(self, hal_id: str) -> bool:
        return hal_id in self._inputs

    def has_onewire_bus(self, hal_id: str) -> bool:
        return hal_id in self._buses

    def has_adc_channel(self, hal_id: str) -> bool:
        return hal_id in self._adcs

    def get_board_info(self) -> str:
        """Board name and version."""
        return self.board.info()