"""
redminefs - Redmine as a read-only filesystem

Projects are directories, issues are files named <id>-<subject>,
and reading a file fetches the issue description.
- mount(): serve the tree through FUSE
- server: the same tree over MCP tools
"""

from .cli import main
from .mount import mount
from .nodes import IssueNode, ProjectNode, RootNode

__all__ = ["IssueNode", "ProjectNode", "RootNode", "main", "mount"]
