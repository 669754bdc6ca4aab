"""
Node identity rules.

Projects and issues keep the tracker's native ids as their inode numbers.
The root has a fixed sentinel. Issue files are named ``<id>-<subject>`` so
that a lookup only needs the numeric prefix to find the issue again.
"""

from .errors import MalformedNameError

ROOT_IDENTIFIER = 65535
MAX_IDENTIFIER = 2**64 - 1

ISSUE_NAME_SEPARATOR = "-"

# Longest file name, in bytes, most filesystems accept
NAME_MAX_BYTES = 255

# Characters that cannot appear in a POSIX file name
_FORBIDDEN_NAME_CHARS = ("/", "\0")


def check_identifier(value: int) -> int:
    """Return value if it fits an unsigned 64-bit inode number."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Identifier must be an integer, got {value!r}")
    if not 0 <= value <= MAX_IDENTIFIER:
        raise ValueError(f"Identifier out of range: {value}")
    return value


def _clean_name(text: str) -> str:
    for char in _FORBIDDEN_NAME_CHARS:
        text = text.replace(char, "_")
    return text


def _fit_name(name: str) -> str:
    """Trim name to NAME_MAX_BYTES of UTF-8 without splitting a character."""
    encoded = name.encode("utf-8")
    if len(encoded) <= NAME_MAX_BYTES:
        return name
    return encoded[:NAME_MAX_BYTES].decode("utf-8", errors="ignore")


def project_entry_name(name: str) -> str:
    """
    Build the directory name for a project.

    Path separators become underscores and overlong names are trimmed;
    lookups compare against this form, not the raw tracker name.
    """
    name = _clean_name(name)
    if name in ("", ".", ".."):
        name = name.replace(".", "_") or "_"
    return _fit_name(name)


def issue_entry_name(issue_id: int, subject: str) -> str:
    """
    Build the file name for an issue.

    The subject is trimmed when the name would exceed NAME_MAX_BYTES; only
    the numeric prefix matters for lookups.

    Args:
        issue_id: Tracker issue id
        subject: Issue subject, used verbatim apart from path separators

    Returns:
        Entry name such as ``"42-Fix bug"``
    """
    return _fit_name(
        f"{check_identifier(issue_id)}{ISSUE_NAME_SEPARATOR}{_clean_name(subject)}"
    )


def parse_issue_id(name: str) -> int:
    """
    Extract the issue id from an entry name.

    Only the leading run of decimal digits counts; whatever follows is
    ignored, so ``"42-Fix bug"`` and ``"42-anything"`` both resolve to 42.

    Raises:
        MalformedNameError: name does not start with a digit
    """
    end = 0
    while end < len(name) and name[end] in "0123456789":
        end += 1
    if end == 0:
        raise MalformedNameError(f"No issue id in entry name '{name}'")

    try:
        return check_identifier(int(name[:end]))
    except ValueError as e:
        raise MalformedNameError(f"Issue id in '{name}' is out of range") from e
