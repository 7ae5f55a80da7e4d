""" Fatal conditions that abort a run. The CLI maps them to exit codes. """

from typing import Tuple


class MapsCreatorError(Exception):
    exit_code: int = 1


class DimensionMismatchError(MapsCreatorError):
# Two channels going to the same packed map have different resolutions.
    exit_code: int = 2

    def __init__(self, map_index: int, channel_name: str, expected: Tuple[int, int], actual: Tuple[int, int]) -> None:
        self.map_index = map_index
        self.channel_name = channel_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Mismatched image sizes within channels going to map {map_index}: "
            f"{expected[0]}x{expected[1]} vs. {actual[0]}x{actual[1]} ('{channel_name}')"
        )


class EncodeFailureError(MapsCreatorError):
# The packed map could not be written to disk.
    exit_code: int = 3

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        message = f"Failed to write file: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
