import pytest

from backend.channel_registry import ChannelRegistry
from backend.texture_classes import AlphaState, ChannelDefinition, ChannelIndex, SlotAssignment
from settings import ALPHA_CHANNEL_NAME, CHANNEL_CONFIG, MAP_COUNT


def test_registry_keeps_config_order(registry):
    assert registry.names() == ["albedo", "alpha", "roughness", "metalness", "normal", "tintmask", "occlusion", "selfillum"]
    assert len(registry) == 8
    assert "normal" in registry
    assert "height" not in registry


@pytest.mark.parametrize("name, default, map_index, slots, alpha_state", [
    ("albedo", 255, 1, (ChannelIndex.R, ChannelIndex.G, ChannelIndex.B), AlphaState.NONE),
    ("alpha", 255, 1, (ChannelIndex.A,), AlphaState.NONE),
    ("roughness", 242, 2, (ChannelIndex.R,), AlphaState.NONE),
    ("metalness", 10, 2, (ChannelIndex.B,), AlphaState.NONE),
    ("normal", 127, 2, (ChannelIndex.G, ChannelIndex.A), AlphaState.NONE),
    ("tintmask", 255, 3, (ChannelIndex.R,), AlphaState.TINT_MASK),
    ("occlusion", 255, 3, (ChannelIndex.G,), AlphaState.OCCLUSION),
    ("selfillum", 255, 3, (ChannelIndex.B,), AlphaState.SELF_ILLUM),
])
def test_channel_definitions(registry, name, default, map_index, slots, alpha_state):
    channel = registry.get(name)
    assert channel.default_value == default
    assert channel.map_index == map_index
    assert channel.channel_indices == slots
    assert channel.alpha_state == alpha_state


def test_alpha_channel_is_designated(registry):
    assert registry.alpha_channel.name == "alpha"
    assert registry.alpha_channel.assignment == SlotAssignment(1, (ChannelIndex.A,))


def test_alpha_state_codes():
    assert [int(state) for state in AlphaState] == [0, 1, 2, 3, 4]


def test_unknown_channel_raises(registry):
    with pytest.raises(KeyError):
        registry.get("height")


def test_alpha_state_channels_in_priority_order(registry):
    assert [channel.name for channel in registry.alpha_state_channels()] == ["tintmask", "occlusion", "selfillum"]


def test_channels_for_map_default(registry):
    assert [channel.name for channel, _ in registry.channels_for_map(2)] == ["roughness", "metalness", "normal"]


def test_swapped_returns_new_assignment(registry):
    original = registry.default_assignment()
    swapped = registry.swapped(original, "occlusion", "alpha")

    assert swapped["occlusion"] == SlotAssignment(1, (ChannelIndex.A,))
    assert swapped["alpha"] == SlotAssignment(3, (ChannelIndex.G,))
    assert original["occlusion"] == SlotAssignment(3, (ChannelIndex.G,))
    assert registry.get("occlusion").map_index == 3
    assert registry.swapped(swapped, "occlusion", "alpha") == original


def test_swapped_unknown_channel(registry):
    with pytest.raises(KeyError):
        registry.swapped(registry.default_assignment(), "occlusion", "height")


def _config(**overrides):
    config = {name: dict(entry) for name, entry in CHANNEL_CONFIG.items()}
    config.update(overrides)
    return config


@pytest.mark.parametrize("overrides", [
    {"alpha": {"default": 255, "map": 1, "slots": ["A"], "alpha_state": "OCCLUSION"}},
    {"roughness": {"default": 242, "map": 4, "slots": ["R"], "alpha_state": ""}},
    {"roughness": {"default": 242, "map": 2, "slots": ["X"], "alpha_state": ""}},
    {"roughness": {"default": 242, "map": 2, "slots": [], "alpha_state": ""}},
    {"roughness": {"default": 242, "map": 2, "slots": ["R", "R"], "alpha_state": ""}},
    {"roughness": {"default": 300, "map": 2, "slots": ["R"], "alpha_state": ""}},
    {"roughness": {"default": 242, "map": 2, "slots": ["R"], "alpha_state": "SPECULAR"}},
])
def test_invalid_config_rejected(overrides):
    with pytest.raises(ValueError):
        ChannelRegistry.from_config(_config(**overrides), ALPHA_CHANNEL_NAME, MAP_COUNT)


def test_missing_alpha_channel_rejected():
    with pytest.raises(ValueError):
        ChannelRegistry.from_config(CHANNEL_CONFIG, "opacity", MAP_COUNT)


def test_duplicate_channel_rejected():
    channel = ChannelDefinition("alpha", 255, 1, (ChannelIndex.A,))
    with pytest.raises(ValueError):
        ChannelRegistry([channel, channel], "alpha", MAP_COUNT)
