"""
Filesystem node tree.

Three node kinds make up the tree:
- RootNode: the mount root, one directory per project
- ProjectNode: one project, one file per issue
- IssueNode: one issue, the file content is its description

Nodes are cheap value objects built on each lookup and dropped afterwards.
Only the RootNode keeps state: the last project listing, used to resolve
project names back to ids.
"""

import logging
import stat
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import MalformedNameError, NotADirectory, NotFoundError, TrackerError
from .identity import (
    ROOT_IDENTIFIER,
    check_identifier,
    issue_entry_name,
    parse_issue_id,
    project_entry_name,
)
from .tracker import TrackerClient

logger = logging.getLogger(__name__)

# Issue bodies are only fetched on read, so files report a fixed size
ISSUE_SIZE_PLACEHOLDER = 1000

DIRECTORY_PERMISSIONS = 0o555
FILE_PERMISSIONS = 0o444


class EntryKind(Enum):
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class DirectoryEntry:
    identifier: int
    name: str
    kind: EntryKind


@dataclass(frozen=True)
class Attributes:
    identifier: int
    kind: EntryKind
    permissions: int
    size: int = 0

    @property
    def mode(self) -> int:
        file_type = stat.S_IFDIR if self.kind is EntryKind.DIRECTORY else stat.S_IFREG
        return file_type | self.permissions

    def to_stat(self, uid: int, gid: int, now: float) -> dict[str, Any]:
        """Render as the stat dictionary fusepy expects from getattr."""
        return {
            "st_ino": self.identifier,
            "st_mode": self.mode,
            "st_nlink": 2 if self.kind is EntryKind.DIRECTORY else 1,
            "st_size": self.size,
            "st_uid": uid,
            "st_gid": gid,
            "st_atime": now,
            "st_mtime": now,
            "st_ctime": now,
        }


class DirectoryNode(ABC):
    @abstractmethod
    def attributes(self) -> Attributes: ...

    @abstractmethod
    def list_children(self) -> list[DirectoryEntry]: ...

    @abstractmethod
    def lookup_child(self, name: str) -> "Node": ...


class FileNode(ABC):
    @abstractmethod
    def attributes(self) -> Attributes: ...

    @abstractmethod
    def read_all(self) -> bytes: ...


@dataclass(frozen=True)
class IssueNode(FileNode):
    """A single issue exposed as a read-only file."""

    client: TrackerClient
    issue_id: int

    def attributes(self) -> Attributes:
        return Attributes(
            identifier=self.issue_id,
            kind=EntryKind.FILE,
            permissions=FILE_PERMISSIONS,
            size=ISSUE_SIZE_PLACEHOLDER,
        )

    def read_all(self) -> bytes:
        """Fetch the issue description. Every call goes to the tracker."""
        logger.debug("Fetching body of issue %d", self.issue_id)
        return self.client.get_issue_body(self.issue_id).encode("utf-8")


@dataclass(frozen=True)
class ProjectNode(DirectoryNode):
    """A project exposed as a directory of issue files."""

    client: TrackerClient
    project_id: int

    def attributes(self) -> Attributes:
        return Attributes(
            identifier=self.project_id,
            kind=EntryKind.DIRECTORY,
            permissions=DIRECTORY_PERMISSIONS,
        )

    def list_children(self) -> list[DirectoryEntry]:
        logger.debug("Listing issues of project %d", self.project_id)
        return [
            DirectoryEntry(
                identifier=check_identifier(issue.id),
                name=issue_entry_name(issue.id, issue.subject),
                kind=EntryKind.FILE,
            )
            for issue in self.client.list_issues(self.project_id)
        ]

    def lookup_child(self, name: str) -> IssueNode:
        """
        Resolve an issue file by the numeric prefix of its name.

        No remote call is made; the id is trusted until the file is read.

        Raises:
            NotFoundError: name does not start with an issue id
        """
        try:
            issue_id = parse_issue_id(name)
        except MalformedNameError as e:
            raise NotFoundError(str(e)) from e
        return IssueNode(client=self.client, issue_id=issue_id)


class RootNode(DirectoryNode):
    """
    The mount root, listing every project as a directory.

    Project lookups are answered from the most recent listing. The listing
    is an immutable tuple swapped under a lock, so concurrent readers see
    either the old or the new generation.
    """

    def __init__(self, client: TrackerClient) -> None:
        self.client = client
        self._lock = threading.Lock()
        self._snapshot: tuple[DirectoryEntry, ...] | None = None

    def attributes(self) -> Attributes:
        return Attributes(
            identifier=ROOT_IDENTIFIER,
            kind=EntryKind.DIRECTORY,
            permissions=DIRECTORY_PERMISSIONS,
        )

    def list_children(self) -> list[DirectoryEntry]:
        logger.debug("Listing projects")
        entries = tuple(
            DirectoryEntry(
                identifier=check_identifier(project.id),
                name=project_entry_name(project.name),
                kind=EntryKind.DIRECTORY,
            )
            for project in self.client.list_projects()
        )
        with self._lock:
            self._snapshot = entries
        return list(entries)

    def snapshot(self) -> tuple[DirectoryEntry, ...] | None:
        """Return the last listing, or None if none was taken yet."""
        with self._lock:
            return self._snapshot

    def lookup_child(self, name: str) -> ProjectNode:
        """
        Resolve a project directory by its exact entry name.

        Names are compared in their listed form (see project_entry_name).

        Raises:
            NotFoundError: no project of that name in the last listing
        """
        entries = self.snapshot()
        if entries is None:
            # Nothing listed yet on this mount; take the first listing now
            try:
                entries = tuple(self.list_children())
            except TrackerError as e:
                raise NotFoundError(f"Cannot list projects: {e}") from e

        for entry in entries:
            if entry.name == name:
                return ProjectNode(client=self.client, project_id=entry.identifier)
        raise NotFoundError(f"No project named '{name}'")


Node = RootNode | ProjectNode | IssueNode


def split_path(path: str) -> tuple[str, ...]:
    """Split a mount-relative path into its non-empty components."""
    return tuple(part for part in path.split("/") if part)


def resolve(root: RootNode, path: str) -> Node:
    """
    Walk a path from the root through lookup_child.

    Raises:
        NotFoundError: a component does not exist
        NotADirectory: a component below a file was requested
    """
    node: Node = root
    for part in split_path(path):
        if not isinstance(node, DirectoryNode):
            raise NotADirectory(f"'{part}' is below a file in '{path}'")
        node = node.lookup_child(part)
    return node
