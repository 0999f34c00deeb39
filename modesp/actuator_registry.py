"""Registry through which actuator drivers are created by type name."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from modesp.actuator_driver import ActuatorDriver

_log = logging.getLogger(__name__)

_D = TypeVar("_D")

DriverFactory = Callable[[], ActuatorDriver]


class ActuatorDriverRegistry:
    """Maps driver type identifiers to factories that build drivers."""

    _instance: ActuatorDriverRegistry | None = None

    def __init__(self) -> None:
        self._factories: dict[str, DriverFactory] = {}

    @staticmethod
    def instance() -> ActuatorDriverRegistry:
        """The process-wide registry."""
        if ActuatorDriverRegistry._instance is None:
            ActuatorDriverRegistry._instance = ActuatorDriverRegistry()
        return ActuatorDriverRegistry._instance

    def register_driver(self, driver_type: str, factory: DriverFactory) -> bool:
        """Register a factory; return False if the type is already taken."""
        if driver_type in self._factories:
            _log.warning("Driver type '%s' already registered", driver_type)
            return False
        self._factories[driver_type] = factory
        _log.info("Registered actuator driver: %s", driver_type)
        return True

    def create_driver(self, driver_type: str) -> ActuatorDriver | None:
        """Build a new driver of the given type, or None if the type is unknown."""
        factory = self._factories.get(driver_type)
        if factory is None:
            _log.error("Unknown actuator driver type: %s", driver_type)
            return None
        return factory()

    def get_registered_types(self) -> list[str]:
        """Registered type identifiers, in registration order."""
        return list(self._factories)

    def has_driver(self, driver_type: str) -> bool:
        return driver_type in self._factories


def register_actuator_driver(driver_type: str) -> Callable[[type[_D]], type[_D]]:
    """Class decorator registering a driver class with the global registry."""

    def decorator(cls: type[_D]) -> type[_D]:
        ActuatorDriverRegistry.instance().register_driver(driver_type, cls)
        return cls

    return decorator