""" Packs single-channel source textures into maps1/maps2/maps3 and writes the PBRStandard .vmt referencing them. """

import os
import sys
import time
from typing import List, Optional, Tuple

from backend.channel_registry import ChannelRegistry
from backend.errors import DimensionMismatchError, MapsCreatorError
from backend.image_lib import Raster
from backend.io_backend import (FileExists, image_name, load_source, map_file_name, save_packed_map, source_exists,
                                write_descriptor)
from backend.texture_classes import AlphaState, ChannelDefinition, EffectiveAssignment, RunState, SlotAssignment

from settings import ALPHA_CHANNEL_NAME, CHANNEL_CONFIG, DESCRIPTOR_EXTENSION, MAP_COUNT, SHOW_DETAILS, SOURCE_FILE_TYPE

from utils import format_resolution, log




# Slot layout for the default registry (maps<N>: R, G, B, A):
# maps1: albedo.R, albedo.G, albedo.B, alpha
# maps2: roughness, normal.R, metalness, normal.G
# maps3: tintmask, occlusion, selfillum, -
#
# If e.g. "<name>_occlusion.png" exists, occlusion takes over maps1's alpha slot and alpha moves to maps3.G:
# maps1: albedo.R, albedo.G, albedo.B, occlusion
# maps3: tintmask, alpha, selfillum, -


USAGE: str = (
    "maps_creator.py <texture_name> [<texture_name> ...]\n"
    "Will output maps1, maps2, [and maps3 if required] in the most efficient way for a given material.\n"
    f"This will read files with <texture_name>_channel.{SOURCE_FILE_TYPE}, where channel can be one of:"
)




#                                           === Pipeline ===


def build_registry() -> ChannelRegistry:
# Builds the channel registry from settings; done once per process and passed to every run.
    return ChannelRegistry.from_config(CHANNEL_CONFIG, ALPHA_CHANNEL_NAME, MAP_COUNT)


def create_maps(texture_name: str, registry: ChannelRegistry, file_exists: FileExists = os.path.isfile) -> RunState:
# Runs the whole pipeline for a single texture name.
# Raises MapsCreatorError on a fatal condition; maps written before the failure are kept, the .vmt is not written.

    state = RunState(texture_name=texture_name, map_count=registry.map_count)
    state.alpha_state = determine_alpha_state(texture_name, registry, file_exists)
    assignment: EffectiveAssignment = fixup_alpha_state(registry, state.alpha_state)

    if state.alpha_state != AlphaState.NONE:
        log(f"Alpha state: {state.alpha_state.name.lower()} ({int(state.alpha_state)}), maps1 alpha slot reassigned.", "info")

    output_maps(texture_name, registry, assignment, state, file_exists)
    write_descriptor(state)
    log(f"Created: {state.descriptor_path}", "complete")
    return state


def determine_alpha_state(texture_name: str, registry: ChannelRegistry, file_exists: FileExists = os.path.isfile) -> AlphaState:
# Picks the alpha state of the first alpha state channel (in registry order) whose source file exists.
# Later candidates are ignored, not reported as a conflict.

    present: List[ChannelDefinition] = [
        channel for channel in registry.alpha_state_channels()
        if source_exists(texture_name, channel, file_exists)
    ]
    if not present:
        return AlphaState.NONE

    winner = present[0]
    ignored = [channel.name for channel in present[1:] if channel.alpha_state != winner.alpha_state]
    if ignored:
        log(f"Warning: '{winner.name}' takes the maps1 alpha slot, ignoring: {', '.join(ignored)}", "warn")
    return winner.alpha_state


def fixup_alpha_state(registry: ChannelRegistry, alpha_state: AlphaState, assignment: Optional[EffectiveAssignment] = None) -> EffectiveAssignment:
# Swaps the map/slots of the channels matching the alpha state with those of the alpha channel.
# Returns a new assignment; applying it twice with the same state gives back the input.

    if assignment is None:
        assignment = registry.default_assignment()
    if alpha_state == AlphaState.NONE:
        return dict(assignment)

    for channel in registry.with_alpha_state(alpha_state):
        assignment = registry.swapped(assignment, channel.name, registry.alpha_channel.name)
    return assignment


def output_maps(texture_name: str, registry: ChannelRegistry, assignment: EffectiveAssignment, state: RunState,
                file_exists: FileExists = os.path.isfile) -> None:
# Composites and writes each packed map in ascending order, marking written maps in the run state.

    for map_index in range(1, registry.map_count + 1):
        packed_map: Optional[Raster] = composite_map(texture_name, map_index, registry, assignment, file_exists)
        if packed_map is None:
            continue

        output_path: str = map_file_name(texture_name, map_index)
        save_packed_map(packed_map, output_path)
        state.mark_written(map_index)

        if SHOW_DETAILS:
            log(f"Created: {output_path} ({format_resolution(packed_map.size)})", "complete")
        else:
            log(f"Created: {output_path}", "complete")


def composite_map(texture_name: str, map_index: int, registry: ChannelRegistry, assignment: EffectiveAssignment,
                  file_exists: FileExists = os.path.isfile) -> Optional[Raster]:
# Builds a single packed map from every channel assigned to it.
# Missing sources are filled with their default value; returns None when the map would only contain defaults.
# Raises DimensionMismatchError when two sources for this map differ in size.

    channels_for_map: List[Tuple[ChannelDefinition, SlotAssignment]] = registry.channels_for_map(map_index, assignment)
    if not channels_for_map:
        log(f"Skipped: map {map_index} has no channels assigned.", "skip")
        return None

    packed_map: Optional[Raster] = None # Allocated from the first source that decodes.
    resolution: Optional[Tuple[int, int]] = None
    pending_defaults: List[Tuple[ChannelDefinition, SlotAssignment]] = [] # Missing channels seen before the map size was known.

    for channel, slots in channels_for_map:
        source_path: str = image_name(texture_name, channel)
        source: Optional[Raster] = load_source(source_path, file_exists)

        if source is None:
            _log_default(channel, slots)
            if packed_map is None:
                pending_defaults.append((channel, slots))
            else:
                _fill_default(packed_map, channel, slots)
            continue

        if resolution is not None and source.size != resolution:
            raise DimensionMismatchError(map_index, channel.name, resolution, source.size)

        if packed_map is None:
            resolution = source.size
            packed_map = Raster.new(*resolution)
            for pending_channel, pending_slots in pending_defaults:
                _fill_default(packed_map, pending_channel, pending_slots)
            pending_defaults = []

        for source_channel, target_channel in enumerate(slots.channel_indices):
            packed_map.copy_channel(source, source_channel, target_channel)
            _log_found(channel, slots, target_channel)

    if packed_map is None:
        log(f"Discarding map {map_index} as it contains only defaults.", "info")
        return None
    return packed_map


def _fill_default(packed_map: Raster, channel: ChannelDefinition, slots: SlotAssignment) -> None:
    for target_channel in slots.channel_indices:
        packed_map.fill_channel(target_channel, channel.default_value)


def _log_found(channel: ChannelDefinition, slots: SlotAssignment, target_channel: int) -> None:
    if SHOW_DETAILS:
        log(f"Found {channel.name} putting in map {slots.map_index} channel {int(target_channel)}", "info")


def _log_default(channel: ChannelDefinition, slots: SlotAssignment) -> None:
    slot_names = ", ".join(slot.name for slot in slots.channel_indices)
    log(f"Didn't find {channel.name}, putting default {channel.default_value} in map {slots.map_index} ({slot_names})", "info")




#                                         === CLI entry point ===


def print_usage(registry: ChannelRegistry) -> None:
    log("You need to specify a texture name.", "warn")
    print(USAGE)
    for name in registry.names():
        print(name)


def main(argv: Optional[List[str]] = None) -> int:
# Returns the process exit code: 0 on success (or when only usage was printed), the error's exit code otherwise.

    texture_names: List[str] = [name.strip() for name in (sys.argv[1:] if argv is None else argv) if name.strip()]
    start_time = time.time()

    log("MapsCreator", "info")
    registry: ChannelRegistry = build_registry()

    if not texture_names:
        print_usage(registry)
        return 0

    for texture_name in texture_names:
        log(f"\nProcessing: {texture_name}", "info")
        try:
            create_maps(texture_name, registry)
        except MapsCreatorError as error:
            log(str(error), "error")
            log(f"Aborted: '{texture_name}' - no .{DESCRIPTOR_EXTENSION} written.", "error")
            return error.exit_code

    log("", "info")  # Visual separator
    log("Done! You now need to convert to .vtf, and fixup the paths in your .vmt!", "complete")

    if SHOW_DETAILS:
        elapsed_time = time.time() - start_time
        log(f"Execution time: {elapsed_time:.2f} seconds", "info")
    return 0


if __name__ == "__main__":
    sys.exit(main())
