from enum import IntEnum
from typing import Dict, List, Optional, Tuple, TypedDict
from dataclasses import dataclass, field


CHANNEL_COUNT: int = 4 # Every packed map and every decoded source is RGBA.


class ChannelIndex(IntEnum):
    R = 0
    G = 1
    B = 2
    A = 3


class AlphaState(IntEnum):
# Semantic content of maps1's alpha slot; the integer value is written to the descriptor as $maps1alpha.
    NONE = 0
    OCCLUSION = 1
    SELF_ILLUM = 2
    TINT_MASK = 3
    SUBSURFACE = 4


class ChannelConfig(TypedDict):
    default: int # 8bit value used when the source image is missing.
    map: int # Packed map the channel targets by default (1..MAP_COUNT).
    slots: List[str] # Destination channels in the packed map, in source-channel order, e.g., ["G", "A"].
    alpha_state: str # AlphaState member name when the channel can take over maps1's alpha slot, "" otherwise.


@dataclass(frozen=True)
class SlotAssignment:
    map_index: int # Packed map the channel is written to.
    channel_indices: Tuple[ChannelIndex, ...] # Destination slots, in source-channel order.


EffectiveAssignment = Dict[str, SlotAssignment] # Maps a channel name to its slots for the current run, e.g., "occlusion" → SlotAssignment(1, (A,)).


@dataclass(frozen=True)
class ChannelDefinition:
    name: str # Channel name; also the source filename suffix, e.g., "roughness" for "<name>_roughness.png".
    default_value: int # 8bit value used when the source image is missing.
    map_index: int # Default packed map.
    channel_indices: Tuple[ChannelIndex, ...] # Default destination slots.
    alpha_state: AlphaState = AlphaState.NONE # Non-NONE channels are mutually exclusive candidates for maps1's alpha slot.

    @property
    def assignment(self) -> SlotAssignment:
        return SlotAssignment(self.map_index, self.channel_indices)


@dataclass
class RunState:
    texture_name: str # Texture name as given on the CLI, may contain a directory prefix.
    map_count: int # Number of packed maps.
    alpha_state: AlphaState = AlphaState.NONE # Alpha state resolved for this run.
    written_maps: List[bool] = field(default_factory=list) # Indexed by map number; True if the map was written to disk.
    descriptor_path: Optional[str] = None # Set once the descriptor has been written.

    def __post_init__(self) -> None:
        if not self.written_maps:
            self.written_maps = [False] * (self.map_count + 1)
        # Index 0 is unused, so map numbers index the list directly.

    def mark_written(self, map_index: int) -> None:
        self.written_maps[map_index] = True

    def written_map_indices(self) -> List[int]:
        return [map_index for map_index, written in enumerate(self.written_maps) if written]
