"""Protocol layer: envelope codec, command builders, response parsing, and login crypto."""

from .framing import build_frame, parse_frame
from .commands import Command, build_command
