""" Maps Creator settings. """

import json
import os
from typing import Dict

from backend.texture_classes import ChannelConfig


def _as_bool(v) -> bool:
# Converts .json input (bool/int/str/None) to a real bool;
# Avoids the case where a non-empty string like "False" is treated as True.

    if isinstance(v, bool): return v
    if isinstance(v, str):
        input_str = v.strip().lower()
        if input_str == "": return False
        return input_str in ("1","true","yes","on")
    return bool(v)



#                                           === Loading JSON file ===

_config_path = os.path.join(os.path.dirname(__file__), "config.json")
_config_data: dict = {}
if os.path.isfile(_config_path):
    with open(_config_path, "r", encoding="utf-8") as f:
        _config_data = json.load(f)


# Assigning config values:
SHADER_NAME: str = (_config_data.get("SHADER_NAME") or "PBRStandard").strip() # Shader written on the first line of the .vmt.
SOURCE_FILE_TYPE: str = (_config_data.get("SOURCE_FILE_TYPE") or "png").strip().lower().lstrip(".") # File type of the source channel images.
SHOW_DETAILS: bool = _as_bool(_config_data.get("SHOW_DETAILS", False)) # Shows details like exact resolution and destination slots when printing logs.




#                                           === Constants ===

MAP_COUNT: int = 3 # Packed maps: maps1, maps2, maps3.
OUTPUT_FILE_TYPE: str = "png"
DESCRIPTOR_EXTENSION: str = "vmt"

ALPHA_CHANNEL_NAME: str = "alpha" # Channel that owns maps1's alpha slot unless an alpha state channel takes it over.

CHANNEL_CONFIG: Dict[str, ChannelConfig] = {
    "albedo": {"default": 255, "map": 1, "slots": ["R", "G", "B"], "alpha_state": ""},
    "alpha": {"default": 255, "map": 1, "slots": ["A"], "alpha_state": ""},
    "roughness": {"default": int(0.95 * 255), "map": 2, "slots": ["R"], "alpha_state": ""},
    "metalness": {"default": int(0.04 * 255), "map": 2, "slots": ["B"], "alpha_state": ""},
    "normal": {"default": 127, "map": 2, "slots": ["G", "A"], "alpha_state": ""},
    "tintmask": {"default": 255, "map": 3, "slots": ["R"], "alpha_state": "TINT_MASK"},
    "occlusion": {"default": 255, "map": 3, "slots": ["G"], "alpha_state": "OCCLUSION"},
    "selfillum": {"default": 255, "map": 3, "slots": ["B"], "alpha_state": "SELF_ILLUM"}}
# Order matters: it is the lookup order for source files and the priority order when several alpha state channels exist.
# Slots are filled from the source image's R, G, B... in order, e.g., normal's R goes to G and its G goes to A.
