"""
Claude Desktop configuration handling.

The installer owns exactly one entry, ``mcpServers["df-mcp"]``. Every other
key in the document, inside ``mcpServers`` or not, is carried through a
read-modify-write untouched.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Tuple

import structlog

from df_installer.config import MCP_SERVER_COMMAND, MCP_SERVER_KEY, InstallerContext
from df_installer.exceptions import HostConfigError

logger = structlog.get_logger(__name__)

MCP_SERVERS = "mcpServers"


def empty_document() -> Dict[str, Any]:
    return {MCP_SERVERS: {}}


def load_host_config(path: Path) -> Tuple[Dict[str, Any], bool]:
    """
    Read the config document.

    Returns:
        (document, corrupt). A missing file yields an empty document; a file
        that is not a JSON object yields an empty document with
        ``corrupt=True``. ``mcpServers`` is always present and a dict.
    """
    if not path.exists():
        return empty_document(), False
    try:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(event="Could not parse Claude Desktop config", path=str(path), error=str(e))
        return empty_document(), True
    if not isinstance(document, dict):
        logger.warning(event="Claude Desktop config is not a JSON object", path=str(path))
        return empty_document(), True
    if not isinstance(document.get(MCP_SERVERS), dict):
        document[MCP_SERVERS] = {}
    return document, False


def has_integration_entry(document: Dict[str, Any]) -> bool:
    return MCP_SERVER_KEY in document.get(MCP_SERVERS, {})


def build_integration_entry(
    ctx: InstallerContext, service_url: str, api_key: str
) -> Dict[str, Any]:
    return {
        "command": MCP_SERVER_COMMAND,
        "args": [str(ctx.integration_entry_point)],
        "env": {
            "DREAMFACTORY_URL": service_url,
            "DREAMFACTORY_API_KEY": api_key,
        },
    }


def merge_integration_entry(
    document: Dict[str, Any], entry: Dict[str, Any]
) -> Dict[str, Any]:
    document.setdefault(MCP_SERVERS, {})[MCP_SERVER_KEY] = entry
    return document


def remove_integration_entry(document: Dict[str, Any]) -> bool:
    """Drop the df-mcp entry. Returns True if there was one."""
    servers = document.get(MCP_SERVERS, {})
    if MCP_SERVER_KEY not in servers:
        return False
    del servers[MCP_SERVER_KEY]
    return True


def backup_corrupt_config(path: Path) -> Path:
    backup = path.with_name(path.name + ".bak")
    shutil.copy2(path, backup)
    logger.info(event="Backed up unreadable Claude Desktop config", backup=str(backup))
    return backup


def write_host_config(path: Path, document: Dict[str, Any]) -> None:
    """
    Write the document as 2-space indented JSON.

    The content goes to a temporary file in the same directory which then
    replaces the target, so readers see either the old or the new file.
    """
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates 0600; keep the permissions of the file being replaced
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise HostConfigError(
            f"Configuration update failed: {e}", path=str(path), cause=e
        ) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
    logger.info(event="Wrote Claude Desktop config", path=str(path))
