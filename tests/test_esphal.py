import pytest

from modesp.boards import REV_A_REFRIGERATOR
from modesp.esphal import ESPhal, ResourceNotFoundError
from modesp.hal import AdcChannel, GpioInput, GpioOutput, OneWireBus


class _Out(GpioOutput):
    def __init__(self):
        self.state = False

    def set_state(self, is_on):
        self.state = is_on

    def get_state(self):
        return self.state


class _In(GpioInput):
    def get_state(self):
        return True


class _Bus(OneWireBus):
    def search_devices(self):
        return []

    def request_temperatures(self):
        pass

    def read_temperature(self, address):
        return 0.0


class _Adc(AdcChannel):
    def read_raw(self):
        return 0

    def read_voltage_mv(self):
        return 0


@pytest.fixture
def hal():
    return ESPhal()


def test_default_board_info(hal):
    assert hal.board is REV_A_REFRIGERATOR
    assert hal.get_board_info() == "Rev A Refrigerator Controller v1.0"


def test_init_is_idempotent_and_keeps_drivers(hal):
    out = _Out()
    hal.attach_gpio_output("RELAY_COMPRESSOR", out)
    hal.init()
    hal.init()
    assert hal.initialized is True
    assert hal.get_gpio_output("RELAY_COMPRESSOR") is out


def test_not_initialized_before_init(hal):
    assert hal.initialized is False


def test_attach_and_get_each_kind(hal):
    out, inp, bus, adc = _Out(), _In(), _Bus(), _Adc()
    hal.attach_gpio_output("RELAY_FAN", out)
    hal.attach_gpio_input("INPUT_DOOR_SWITCH", inp)
    hal.attach_onewire_bus("ONEWIRE_CHAMBER", bus)
    hal.attach_adc_channel("ADC_PRESSURE_HIGH", adc)
    assert hal.get_gpio_output("RELAY_FAN") is out
    assert hal.get_gpio_input("INPUT_DOOR_SWITCH") is inp
    assert hal.get_onewire_bus("ONEWIRE_CHAMBER") is bus
    assert hal.get_adc_channel("ADC_PRESSURE_HIGH") is adc
    assert hal.has_gpio_output("RELAY_FAN")
    assert hal.has_gpio_input("INPUT_DOOR_SWITCH")
    assert hal.has_onewire_bus("ONEWIRE_CHAMBER")
    assert hal.has_adc_channel("ADC_PRESSURE_HIGH")


def test_has_is_false_before_attach(hal):
    assert hal.has_gpio_output("RELAY_COMPRESSOR") is False
    assert hal.has_gpio_input("INPUT_EMERGENCY") is False
    assert hal.has_onewire_bus("ONEWIRE_EVAPORATOR") is False
    assert hal.has_adc_channel("ADC_SPARE_INPUT") is False


def test_get_missing_output_message(hal):
    with pytest.raises(ResourceNotFoundError) as info:
        hal.get_gpio_output("RELAY_COMPRESSOR")
    assert str(info.value) == (
        "GPIO output 'RELAY_COMPRESSOR' not found. Check board configuration."
    )


@pytest.mark.parametrize(
    "getter, label",
    [
        (ESPhal.get_gpio_input, "GPIO input"),
        (ESPhal.get_onewire_bus, "OneWire bus"),
        (ESPhal.get_adc_channel, "ADC channel"),
    ],
)
def test_get_missing_raises(hal, getter, label):
    with pytest.raises(ResourceNotFoundError) as info:
        getter(hal, "NOPE")
    assert str(info.value) == f"{label} 'NOPE' not found. Check board configuration."


def test_resource_not_found_is_lookup_error(hal):
    with pytest.raises(LookupError):
        hal.get_adc_channel("ADC_PRESSURE_LOW")


def test_attach_unconfigured_id_raises(hal):
    with pytest.raises(ResourceNotFoundError):
        hal.attach_gpio_output("INPUT_DOOR_SWITCH", _Out())
    assert hal.has_gpio_output("INPUT_DOOR_SWITCH") is False


def test_attach_wrong_driver_type_raises(hal):
    with pytest.raises(TypeError):
        hal.attach_gpio_output("RELAY_FAN", _In())
    assert hal.has_gpio_output("RELAY_FAN") is False


def test_attached_driver_is_usable(hal):
    hal.attach_gpio_output("RELAY_LIGHTS", _Out())
    relay = hal.get_gpio_output("RELAY_LIGHTS")
    relay.toggle()
    assert hal.get_gpio_output("RELAY_LIGHTS").get_state() is True