import os
from pathlib import Path
from typing import List, Optional

import structlog

logger = structlog.get_logger(__name__)


def claude_candidate_paths(system: str, home: Path) -> List[Path]:
    """Locations checked for a Claude Desktop install, in order."""
    if system == "Darwin":
        return [Path("/Applications/Claude.app")]
    if system == "Windows":
        local_appdata = os.environ.get("LOCALAPPDATA")
        local = Path(local_appdata) if local_appdata else home / "AppData" / "Local"
        return [
            local / "Claude" / "Claude.exe",
            Path("C:/Program Files/Claude/Claude.exe"),
            Path("C:/Program Files (x86)/Claude/Claude.exe"),
        ]
    return [
        Path("/usr/local/bin/claude"),
        Path("/usr/bin/claude"),
        home / ".local" / "bin" / "claude",
    ]


def detect_host_app(system: str, home: Path) -> Optional[Path]:
    """Return the first existing Claude Desktop location, or None."""
    for candidate in claude_candidate_paths(system, home):
        if candidate.exists():
            logger.debug(event="Found Claude Desktop", path=str(candidate))
            return candidate
    return None
