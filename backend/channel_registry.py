""" Catalogue of the channels that can be packed, built once from CHANNEL_CONFIG and shared by every run. """

from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from backend.texture_classes import (AlphaState, ChannelConfig, ChannelDefinition, ChannelIndex, CHANNEL_COUNT,
                                     EffectiveAssignment, SlotAssignment)


class ChannelRegistry:
    """Immutable, ordered set of channel definitions.

    Registry order is significant: sources are looked up and composited in it, and it is the priority order
    between alpha state channels. The registry itself never changes; per-run slot changes are expressed as an
    EffectiveAssignment derived from default_assignment().
    """

    def __init__(self, channels: List[ChannelDefinition], alpha_channel_name: str, map_count: int) -> None:
        self._channels: Tuple[ChannelDefinition, ...] = tuple(channels)
        self._by_name: Dict[str, ChannelDefinition] = {}
        self.map_count = map_count

        for channel in self._channels:
            if channel.name in self._by_name:
                raise ValueError(f"Duplicate channel '{channel.name}'")
            if not 1 <= channel.map_index <= map_count:
                raise ValueError(f"Channel '{channel.name}' targets map {channel.map_index}, expected 1..{map_count}")
            if not channel.channel_indices or len(channel.channel_indices) > CHANNEL_COUNT:
                raise ValueError(f"Channel '{channel.name}' must fill between 1 and {CHANNEL_COUNT} slots")
            if len(set(channel.channel_indices)) != len(channel.channel_indices):
                raise ValueError(f"Channel '{channel.name}' uses the same slot twice")
            if not 0 <= channel.default_value <= 255:
                raise ValueError(f"Channel '{channel.name}' default {channel.default_value} is not an 8bit value")
            self._by_name[channel.name] = channel

        alpha_channel = self._by_name.get(alpha_channel_name)
        if alpha_channel is None:
            raise ValueError(f"Alpha channel '{alpha_channel_name}' is not registered")
        if alpha_channel.alpha_state != AlphaState.NONE:
            raise ValueError(f"Alpha channel '{alpha_channel_name}' cannot have an alpha state")
        self.alpha_channel: ChannelDefinition = alpha_channel


    @classmethod
    def from_config(cls, channel_config: Mapping[str, ChannelConfig], alpha_channel_name: str, map_count: int) -> "ChannelRegistry":
    # Builds the registry from the CHANNEL_CONFIG layout in settings.

        channels: List[ChannelDefinition] = []
        for name, config in channel_config.items():
            try:
                channel_indices = tuple(ChannelIndex[slot.upper()] for slot in config["slots"])
            except KeyError as error:
                raise ValueError(f"Channel '{name}' has an invalid slot {error}") from None
            try:
                alpha_state = AlphaState[config.get("alpha_state") or "NONE"]
            except KeyError:
                raise ValueError(f"Channel '{name}' has an invalid alpha state '{config.get('alpha_state')}'") from None

            channels.append(ChannelDefinition(
                name=name,
                default_value=int(config["default"]),
                map_index=int(config["map"]),
                channel_indices=channel_indices,
                alpha_state=alpha_state,
            ))
        return cls(channels, alpha_channel_name, map_count)


    def __iter__(self) -> Iterator[ChannelDefinition]:
        return iter(self._channels)

    def __len__(self) -> int:
        return len(self._channels)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> ChannelDefinition:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Unknown channel '{name}'") from None

    def names(self) -> List[str]:
        return [channel.name for channel in self._channels]

    def with_alpha_state(self, alpha_state: AlphaState) -> List[ChannelDefinition]:
        return [channel for channel in self._channels if channel.alpha_state == alpha_state]

    def alpha_state_channels(self) -> List[ChannelDefinition]:
    # Channels that can take over maps1's alpha slot, in priority order.
        return [channel for channel in self._channels if channel.alpha_state != AlphaState.NONE]


    def default_assignment(self) -> EffectiveAssignment:
        return {channel.name: channel.assignment for channel in self._channels}

    def swapped(self, assignment: EffectiveAssignment, first: str, second: str) -> EffectiveAssignment:
    # Returns a copy of the assignment with the map/slots of two channels exchanged.
    # Swapping the same pair twice restores the input.

        self.get(first)
        self.get(second)
        result: EffectiveAssignment = dict(assignment)
        result[first], result[second] = assignment[second], assignment[first]
        return result

    def channels_for_map(self, map_index: int, assignment: Optional[EffectiveAssignment] = None) -> List[Tuple[ChannelDefinition, SlotAssignment]]:
    # Lists channels written to a packed map, in registry order, together with their effective slots.

        assignment = assignment if assignment is not None else self.default_assignment()
        return [
            (channel, assignment[channel.name]) for channel in self._channels
            if assignment[channel.name].map_index == map_index
        ]
