"""Raw log export — the whole store as a JSON array.

No filtering, no truncation: each command is written in its wire form, in
store order, with two-space indentation.  An empty store is ``[]``.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tock.timeline.command import Command


def render_raw_log(commands: Iterable[Command]) -> str:
    """Serialize ``commands`` as a pretty-printed JSON array."""
    return json.dumps(
        [command.to_dict() for command in commands],
        indent=2,
        ensure_ascii=False,
        default=str,
    )
