"""Interfaces that hardware drivers implement."""

from __future__ import annotations

from abc import ABC, abstractmethod


class HalError(Exception):
    """Raised when a hardware operation fails."""


class GpioOutput(ABC):
    """A digital output such as a relay or an LED."""

    @abstractmethod
    def set_state(self, is_on: bool) -> None:
        """Switch the output on or off; raise HalError on failure."""

    @abstractmethod
    def get_state(self) -> bool:
        """Current logical state of the output."""

    def toggle(self) -> None:
        """Invert the output's state."""
        self.set_state(not self.get_state())


class GpioInput(ABC):
    """A digital input such as a button or a reed switch."""

    @abstractmethod
    def get_state(self) -> bool:
        """Whether the input is active."""


class OneWireBus(ABC):
    """A 1-Wire bus carrying temperature sensors."""

    @abstractmethod
    def search_devices(self) -> list[int]:
        """Return the 64-bit addresses of the devices found on the bus."""

    @abstractmethod
    def request_temperatures(self) -> None:
        """Ask every device to start a temperature conversion."""

    @abstractmethod
    def read_temperature(self, address: int) -> float:
        """Temperature in degrees Celsius of one device; raise HalError on failure."""


class AdcChannel(ABC):
    """One channel of an analogue-to-digital converter."""

    @abstractmethod
    def read_raw(self) -> int:
        """Raw converter value; raise HalError on failure."""

    @abstractmethod
    def read_voltage_mv(self) -> int:
        """Input voltage in millivolts; raise HalError on failure."""