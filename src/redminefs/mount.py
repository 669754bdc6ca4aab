"""
fusepy glue for the node tree.

``TrackerOperations`` answers fusepy's path-based callbacks by resolving the
path to a node and calling the node. Tracker failures become errno values
here and nowhere else:
- lookup failures -> ENOENT
- listing and read failures -> EIO
"""

import errno
import logging
import os
import sys
import time
from typing import Any

from .errors import NotADirectory, TrackerError
from .nodes import DirectoryNode, FileNode, Node, RootNode, resolve

logger = logging.getLogger(__name__)

FS_NAME = "redmine filesystem"
FS_SUBTYPE = "redminefs"
VOLUME_NAME = "Redmine"


class TrackerOperations:
    """
    Read-only filesystem callbacks over a RootNode.

    This class carries no fusepy import so it can be exercised without
    libfuse; ``mount()`` binds it to ``fuse.Operations`` for the defaults of
    the callbacks it does not implement.
    """

    def __init__(self, root: RootNode) -> None:
        self.root = root
        self.uid = os.getuid() if hasattr(os, "getuid") else 0
        self.gid = os.getgid() if hasattr(os, "getgid") else 0

    def _resolve(self, path: str) -> Node:
        try:
            return resolve(self.root, path)
        except NotADirectory as e:
            raise OSError(errno.ENOTDIR, str(e), path) from e
        except TrackerError as e:
            logger.debug("Lookup of %s failed: %s", path, e)
            raise OSError(errno.ENOENT, "No such file or directory", path) from e

    def getattr(self, path: str, fh: int | None = None) -> dict[str, Any]:
        node = self._resolve(path)
        return node.attributes().to_stat(self.uid, self.gid, time.time())

    def readdir(
        self, path: str, fh: int | None
    ) -> list[str | tuple[str, dict[str, Any], int]]:
        node = self._resolve(path)
        if not isinstance(node, DirectoryNode):
            raise OSError(errno.ENOTDIR, "Not a directory", path)
        try:
            entries = node.list_children()
        except TrackerError as e:
            logger.warning("Listing %s failed: %s", path, e)
            raise OSError(errno.EIO, "Input/output error", path) from e
        # Carry each entry's inode so use_ino fills d_ino in the dirent
        return [".", ".."] + [
            (entry.name, {"st_ino": entry.identifier}, 0) for entry in entries
        ]

    def access(self, path: str, amode: int) -> int:
        self._resolve(path)
        if amode & os.W_OK:
            raise OSError(errno.EROFS, "Read-only file system", path)
        return 0

    def open(self, path: str, flags: int) -> int:
        if flags & (os.O_WRONLY | os.O_RDWR | os.O_APPEND | os.O_TRUNC):
            raise OSError(errno.EROFS, "Read-only file system", path)
        node = self._resolve(path)
        if not isinstance(node, FileNode):
            raise OSError(errno.EISDIR, "Is a directory", path)
        return 0

    def read(self, path: str, size: int, offset: int, fh: int) -> bytes:
        node = self._resolve(path)
        if not isinstance(node, FileNode):
            raise OSError(errno.EISDIR, "Is a directory", path)
        try:
            content = node.read_all()
        except TrackerError as e:
            logger.warning("Reading %s failed: %s", path, e)
            raise OSError(errno.EIO, "Input/output error", path) from e
        return content[offset : offset + size]

    def statfs(self, path: str) -> dict[str, Any]:
        return {"f_bsize": 4096, "f_frsize": 4096, "f_namemax": 255}


def mount(
    root: RootNode,
    mountpoint: str,
    foreground: bool = True,
    allow_other: bool = False,
) -> None:
    """
    Mount the tree at mountpoint and serve requests until unmounted.

    Requests are served on multiple threads; the node tree keeps no state
    that needs more than the RootNode's own lock.
    """
    import fuse  # fusepy loads libfuse when imported

    class Operations(TrackerOperations, fuse.Operations):
        pass

    options: dict[str, Any] = {
        "foreground": foreground,
        "nothreads": False,
        "ro": True,
        "use_ino": True,
        "fsname": FS_NAME,
        "allow_other": allow_other,
    }
    if sys.platform == "darwin":
        options.update({"volname": VOLUME_NAME, "local": True})
    else:
        options["subtype"] = FS_SUBTYPE

    logger.info("Mounting %s at %s", FS_NAME, mountpoint)
    fuse.FUSE(Operations(root), mountpoint, **options)
    logger.info("Unmounted %s", mountpoint)
