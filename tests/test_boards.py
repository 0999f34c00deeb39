import dataclasses

import pytest

from modesp.boards import (
    REV_A_REFRIGERATOR,
    AdcConfig,
    BoardConfig,
    GpioInputConfig,
    GpioOutputConfig,
    OneWireConfig,
    select_board,
)


def _rev_a():
    return select_board("rev_a_refrigerator")


def test_select_rev_a():
    board = select_board("rev_a_refrigerator")
    assert board is REV_A_REFRIGERATOR
    assert board.info() == "Rev A Refrigerator Controller v1.0"


def test_select_unknown_board_raises():
    with pytest.raises(ValueError, match="rev_x"):
        select_board("rev_x")


def test_rev_a_resource_counts():
    board = select_board("rev_a_refrigerator")
    assert len(board.gpio_outputs) == 6
    assert len(board.gpio_inputs) == 3
    assert len(board.onewire_buses) == 2
    assert len(board.adc_channels) == 4


def test_rev_a_hal_ids_are_unique():
    board = select_board("rev_a_refrigerator")
    ids = [
        c.hal_id
        for group in (board.gpio_outputs, board.gpio_inputs, board.onewire_buses, board.adc_channels)
        for c in group
    ]
    assert len(ids) == 15
    assert len(ids) == len(set(ids))


def test_rev_a_output_details():
    outputs = {c.hal_id: c for c in select_board("rev_a_refrigerator").gpio_outputs}
    assert outputs["RELAY_COMPRESSOR"].pin == 4
    assert outputs["RELAY_COMPRESSOR"].active_high is True
    assert outputs["LED_STATUS"].active_high is False


def test_rev_a_onewire_power_pins():
    buses = {c.hal_id: c for c in select_board("rev_a_refrigerator").onewire_buses}
    assert buses["ONEWIRE_CHAMBER"].power_pin == 33
    assert buses["ONEWIRE_EVAPORATOR"].power_pin is None


def test_rev_a_adc_channels_on_unit_one():
    channels = select_board("rev_a_refrigerator").adc_channels
    assert {c.unit for c in channels} == {1}
    assert [c.channel for c in channels] == [0, 1, 2, 3]


def test_board_config_is_frozen():
    board = select_board("rev_a_refrigerator")
    with pytest.raises(dataclasses.FrozenInstanceError):
        board.name = "other"
    assert board.info() == "Rev A Refrigerator Controller v1.0"


def test_custom_board_info():
    board = BoardConfig(
        name="Bench",
        version="2.3",
        gpio_outputs=(GpioOutputConfig("OUT", 1, True, "out"),),
        gpio_inputs=(GpioInputConfig("IN", 2, False, "in"),),
        onewire_buses=(OneWireConfig("OW", 3, None, "ow"),),
        adc_channels=(AdcConfig("ADC", 1, 0, 11, "adc"),),
    )
    assert board.info() == "Bench v2.3"