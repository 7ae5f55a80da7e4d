""" Input/output backend: file naming conventions, source lookup, and writing packed maps and the .vmt descriptor. """

import os
from typing import Callable, List, Optional

from backend.errors import EncodeFailureError
from backend.image_lib import ImageObject, Raster, open_image, save_image as save_image_file
from backend.texture_classes import AlphaState, ChannelDefinition, RunState

from settings import DESCRIPTOR_EXTENSION, OUTPUT_FILE_TYPE, SHADER_NAME, SOURCE_FILE_TYPE
from utils import close_image_files, log


FileExists = Callable[[str], bool] # Existence predicate, os.path.isfile unless replaced in tests.




#                                           === Naming ===


def image_name(texture_name: str, channel: ChannelDefinition) -> str:
# Source file for a channel, e.g., "tex_roughness.png".
    return f"{texture_name}_{channel.name}.{SOURCE_FILE_TYPE}"


def map_name(texture_name: str, map_index: int) -> str:
# Packed map name without extension, as referenced from the .vmt.
    return f"{texture_name}_maps{map_index}"


def map_file_name(texture_name: str, map_index: int) -> str:
    return f"{map_name(texture_name, map_index)}.{OUTPUT_FILE_TYPE}"


def descriptor_name(texture_name: str) -> str:
    return f"{texture_name}.{DESCRIPTOR_EXTENSION}"




#                                           === Reading ===


def source_exists(texture_name: str, channel: ChannelDefinition, file_exists: FileExists = os.path.isfile) -> bool:
    return file_exists(image_name(texture_name, channel))


def load_source(path: str, file_exists: FileExists = os.path.isfile) -> Optional[Raster]:
# Decodes a source channel image into an RGBA raster.
# Returns None if the file is missing or cannot be decoded; the caller substitutes the default value.

    if not file_exists(path):
        return None

    image: Optional[ImageObject] = None
    try:
        image = open_image(path)
        return Raster.from_image(image)
    except (OSError, ValueError) as error:
        log(f"Warning: failed to open '{path}' ({error}), will use default.", "warn")
        return None
    finally:
        close_image_files([image])




#                                           === Writing ===


def save_packed_map(raster: Raster, path: str) -> None:
# Encodes a packed map; any failure aborts the run.

    output_directory = os.path.dirname(path)
    image: Optional[ImageObject] = None
    try:
        if output_directory:
            os.makedirs(output_directory, exist_ok=True)
        image = raster.to_image()
        save_image_file(image, path)
    except (OSError, ValueError) as error:
        raise EncodeFailureError(path, str(error)) from error
    finally:
        close_image_files([image])


def format_descriptor(texture_name: str, alpha_state: AlphaState, written_maps: List[int]) -> str:
# Builds the .vmt text: the alpha state code, then one line per written map in ascending order.

    lines: List[str] = [
        f"\"{SHADER_NAME}\"",
        "{",
        f"  $maps1alpha {int(alpha_state)}",
    ]
    for map_index in sorted(written_maps):
        lines.append(f"  $maps{map_index} \"{map_name(texture_name, map_index)}\"")
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_descriptor(state: RunState) -> str:
# Writes "<name>.vmt" for the run and returns its path. Always written, even if no maps were.

    path = descriptor_name(state.texture_name)
    output_directory = os.path.dirname(path)
    try:
        if output_directory:
            os.makedirs(output_directory, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="\n") as file:
            file.write(format_descriptor(state.texture_name, state.alpha_state, state.written_map_indices()))
    except OSError as error:
        raise EncodeFailureError(path, str(error)) from error
    state.descriptor_path = path
    return path
