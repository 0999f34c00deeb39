# modesp

Building blocks for a modular refrigeration controller: a module contract, a
hardware abstraction layer that hands drivers out by hardware id, and actuator
drivers for relays and PWM outputs.

## Modules

- `modesp.base_module`: the abstract `BaseModule` (a `name` property plus `init`,
  `update`, `stop`, and the optional hooks `configure`, `is_healthy`,
  `get_health_score`, `get_max_update_time_us` and `register_rpc`), and the
  `ModuleState` and `ModuleType` enums.
- `modesp.hal`: the abstract hardware interfaces `GpioOutput`, `GpioInput`,
  `OneWireBus` and `AdcChannel`, and `HalError` for failed hardware operations.
- `modesp.boards`: frozen dataclasses describing a board (`BoardConfig`,
  `GpioOutputConfig`, `GpioInputConfig`, `OneWireConfig`, `AdcConfig`), the
  `REV_A_REFRIGERATOR` board, and `select_board(name)`, which raises `ValueError`
  for an unknown board name. `"rev_a_refrigerator"` is the only board type.
- `modesp.esphal`: `ESPhal`, built from a `BoardConfig` (the Rev A refrigerator
  board by default). Drivers are attached with `attach_gpio_output`,
  `attach_gpio_input`, `attach_onewire_bus` and `attach_adc_channel`; only hardware
  ids present in the board configuration are accepted, and a driver must implement
  the matching interface (otherwise `TypeError`). `get_*` raises
  `ResourceNotFoundError` for an id with no attached driver; `has_*` tells whether
  one is attached. `get_board_info()` returns e.g.
  `"Rev A Refrigerator Controller v1.0"`.
- `modesp.actuator_driver`: the abstract `ActuatorDriver`, the `ActuatorStatus`
  dataclass with `to_json()`, and `ActuatorError`, raised when a driver cannot be
  configured or refuses a command.
- `modesp.actuator_registry`: `ActuatorDriverRegistry` (a process-wide instance via
  `ActuatorDriverRegistry.instance()`) and the `register_actuator_driver(type)`
  class decorator.
- `modesp.pwm_driver`: `PwmDriver`, registered as `"PWM"`. Accepts a number or
  `{"duty": ...}` as a command, clamps it to the configured min/max duty, ramps
  over `ramp_time_ms` when set, and applies gamma correction. It drives a
  `LedcController`, an in-memory model of channel/timer allocation and duty
  registers. `close()` (or use as a context manager) stops the output.
- `modesp.relay_driver`: `RelayDriver`, registered as `"RELAY"`. Accepts a bool, a
  number (non-zero is on) or `{"state": ...}`; supports `active_low`, custom
  on/off labels, an inrush delay after switching on, and minimum on/off times.
  A command refused by a protection timer raises `ActuatorError`; the commanded
  state is applied by `update()` once the timer expires.

Both drivers take an optional `clock` callable returning milliseconds (and the
relay driver an optional `sleep` callable), which makes their timing testable.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from modesp.esphal import ESPhal
from modesp.hal import GpioOutput
from modesp.relay_driver import RelayDriver


class FakeOutput(GpioOutput):
    def __init__(self):
        self.state = False

    def set_state(self, is_on):
        self.state = is_on

    def get_state(self):
        return self.state


hal = ESPhal()
hal.init()
hal.attach_gpio_output("RELAY_COMPRESSOR", FakeOutput())

relay = RelayDriver()
relay.init(hal, {"hal_id": "RELAY_COMPRESSOR"})
relay.execute_command(True)
print(relay.get_status().to_json())
```

Drivers register themselves when their module is imported, after which they can
be made by name through the registry:

```python
import modesp.pwm_driver  # registers "PWM"
from modesp.actuator_registry import ActuatorDriverRegistry

driver = ActuatorDriverRegistry.instance().create_driver("PWM")
```

## What it does not do

- It does not touch real hardware. `ESPhal.init()` only walks and logs the board
  configuration; you supply and attach your own `GpioOutput`, `GpioInput`,
  `OneWireBus` and `AdcChannel` implementations. PWM output goes to the in-memory
  `LedcController`.
- It has no main loop, module manager, shared state store or event bus: nothing
  routes commands to drivers or publishes their status for you. Call the drivers'
  `execute_command`, `update` and `get_status` yourself.
- There are no sensor drivers and no command-line program.