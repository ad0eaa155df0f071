from __future__ import annotations

from typing import List


def get_command_catalog() -> List[str]:
    return [
        "check",
        "config",
        "rules list",
        "command-catalog",
    ]
