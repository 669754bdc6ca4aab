"""
Redmine MCP Server - browse the redminefs tree without mounting it

Walks the same node tree the FUSE mount serves, so paths are identical:
/<project name>/<issue id>-<subject>

Tools:
- list_directory: List entries of the root or of a project
- read_file: Read one issue description
- stat_path: Attributes (id, kind, mode, size) of any path

Settings: ~/.config/redminefs/settings[.<profile>].json, profile from REDMINEFS_ENV
"""

import logging
import threading
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import default_profile, load_settings, settings_path
from .errors import NotFoundError
from .nodes import DirectoryNode, FileNode, RootNode, resolve
from .tracker import RedmineClient

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP(
    "redminefs",
    instructions="""Read-only view of a Redmine instance as a directory tree.

The root lists projects as directories; each project lists its issues as
files named <issue id>-<subject>; reading a file returns the issue description.
Start with list_directory("/") and walk down from there.""",
)

_root: RootNode | None = None
_root_lock = threading.Lock()


def _get_root() -> RootNode:
    """Get the shared root node, building the Redmine client on first use."""
    global _root
    with _root_lock:
        if _root is None:
            settings = load_settings()
            client = RedmineClient(
                settings.endpoint,
                settings.apikey,
                insecure=settings.insecure,
                timeout=settings.timeout,
            )
            _root = RootNode(client)
        return _root


def _normalize(path: str) -> str:
    """Return path with a single leading slash."""
    return "/" + path.strip("/")


# ============================================
# Browsing Tools
# ============================================


@mcp.tool()
def list_directory(path: str = "/") -> dict[str, Any]:
    """
    List a directory of the Redmine tree.

    Args:
        path: "/" for projects, "/<project name>" for its issues

    Returns:
        Entries with name, kind (directory/file) and id
    """
    path = _normalize(path)
    try:
        node = resolve(_get_root(), path)
        if not isinstance(node, DirectoryNode):
            return {"error": f"'{path}' is not a directory"}

        entries = [
            {"name": entry.name, "kind": entry.kind.value, "id": entry.identifier}
            for entry in node.list_children()
        ]
        return {
            "path": path,
            "entries": entries,
            "count": len(entries),
        }
    except NotFoundError:
        return {"found": False, "error": f"'{path}' not found"}
    except Exception as e:
        return {"error": str(e)}


@mcp.tool()
def read_file(path: str) -> dict[str, Any]:
    """
    Read one issue description.

    Args:
        path: "/<project name>/<issue id>-<subject>" (only the id prefix matters)

    Returns:
        Issue id and its description text
    """
    path = _normalize(path)
    try:
        node = resolve(_get_root(), path)
        if not isinstance(node, FileNode):
            return {"error": f"'{path}' is a directory"}

        return {
            "path": path,
            "id": node.attributes().identifier,
            "content": node.read_all().decode("utf-8"),
        }
    except NotFoundError:
        return {"found": False, "error": f"'{path}' not found"}
    except Exception as e:
        return {"error": str(e)}


@mcp.tool()
def stat_path(path: str) -> dict[str, Any]:
    """
    Get attributes of a path as the mount would report them.

    Args:
        path: Any path in the tree

    Returns:
        id, kind, octal mode and size
    """
    path = _normalize(path)
    try:
        attributes = resolve(_get_root(), path).attributes()
        return {
            "path": path,
            "id": attributes.identifier,
            "kind": attributes.kind.value,
            "mode": oct(attributes.mode),
            "size": attributes.size,
        }
    except NotFoundError:
        return {"found": False, "error": f"'{path}' not found"}
    except Exception as e:
        return {"error": str(e)}


def main() -> None:
    """Entry point for the Redmine MCP server."""
    logger.info(
        "Starting Redmine MCP server, settings: %s", settings_path(default_profile())
    )
    mcp.run()


if __name__ == "__main__":
    main()
