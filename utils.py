""" Console and resource utilities shared by the Maps Creator modules. """

from typing import Iterable, Optional, Set

from backend.image_lib import close_image


LOG_TYPES: list[str] = ["info", "warn", "error", "skip", "complete"]
# Defines log types; every console message goes through log().

def log(message: str, message_kind: LOG_TYPES = "info") -> None:
# Maps different log types.

    if message == "":
        print("")
        return

    if message_kind not in LOG_TYPES:
        message_kind = "info"

    if message_kind == "info":
        print(f"   {message}")
    elif message_kind == "warn":
        print(f"⚠️ {message}")
    elif message_kind == "error":
        print(f"⛔ {message}")
    elif message_kind == "skip":
        print(f"❌ {message}")
    elif message_kind == "complete":
        print(f"✅ {message}")
    else:
        print(message)  # fallback

    # Print styles:
    # info: 3 whitespaces + message
    # warn: ⚠️ + message
    # error: ⛔ + message
    # skip: ❌ + message
    # complete: ✅ + message


def close_image_files(images: Iterable[Optional[object]]) -> None:
# Safely closes all opened images even if there is an error during image processing.

    processed_ids: Set[int] = set()
    for image in images:
        if image is None:
            continue
        image_id = id(image)
        if image_id in processed_ids:
            continue
        processed_ids.add(image_id)
        try:
            close_image(image) # Function from image_lib
        except (OSError, ValueError):
            pass


def format_resolution(size: tuple[int, int]) -> str:
    width, height = size
    return f"{width}x{height}"
