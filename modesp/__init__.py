"""Module contract, hardware abstraction layer and relay/PWM actuator drivers for refrigeration controllers."""

__version__ = "0.1.0"