"""Path and URI identity helpers.

Backup identity must follow the platform's filesystem rules: the same folder
opened as ``/Home/Proj`` and ``/home/proj`` is one session on Windows and
macOS but two sessions on Linux.  ``IS_CASE_SENSITIVE_FS`` is the single
platform predicate; every comparer takes an explicit override so both
behaviours can be exercised on any host.
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, replace
from urllib.parse import quote, unquote, urlsplit, urlunsplit

FILE_SCHEME = "file"

IS_CASE_SENSITIVE_FS = sys.platform.startswith("linux")
"""Linux filesystems are treated as case-sensitive, everything else as not."""

_DRIVE_LETTER_PATH = re.compile(r"^/[a-zA-Z]:")
_PATH_SAFE = "/"
"""Only unreserved characters and ``/`` stay literal; everything else is percent-encoded."""


@dataclass(frozen=True)
class Uri:
    """Minimal immutable URI with a stable string form.

    ``path``, ``query`` and ``fragment`` are stored decoded; ``str(uri)``
    re-encodes them, so ``Uri.parse(str(uri)) == uri``.
    """

    scheme: str
    authority: str = ""
    path: str = ""
    query: str = ""
    fragment: str = ""

    @classmethod
    def parse(cls, value: str) -> Uri:
        """Parse a URI string.  Raises ``ValueError`` if it has no scheme."""
        if not isinstance(value, str):
            msg = f"URI must be a string, got {type(value).__name__}"
            raise TypeError(msg)
        parts = urlsplit(value)
        if not parts.scheme:
            msg = f"URI has no scheme: {value!r}"
            raise ValueError(msg)
        return cls(
            scheme=parts.scheme.lower(),
            authority=parts.netloc,
            path=unquote(parts.path),
            query=unquote(parts.query),
            fragment=unquote(parts.fragment),
        )

    @classmethod
    def file(cls, path: str | os.PathLike[str]) -> Uri:
        """Build a ``file:`` URI from a local filesystem path."""
        value = os.fspath(path)
        if os.name == "nt":
            value = value.replace("\\", "/")

        authority = ""
        if value.startswith("//"):
            # UNC path: //server/share/...
            authority, _, rest = value[2:].partition("/")
            value = f"/{rest}"
        if not value.startswith("/"):
            value = f"/{value}"
        return cls(scheme=FILE_SCHEME, authority=authority, path=value)

    @property
    def fs_path(self) -> str:
        """Filesystem path for this URI (meaningful for ``file:`` URIs)."""
        if self.authority and len(self.path) > 1 and self.scheme == FILE_SCHEME:
            value = f"//{self.authority}{self.path}"
        elif _DRIVE_LETTER_PATH.match(self.path):
            value = self.path[1].lower() + self.path[2:]
        else:
            value = self.path
        if os.name == "nt":
            value = value.replace("/", "\\")
        return value

    def __str__(self) -> str:
        return urlunsplit((
            self.scheme,
            self.authority,
            quote(self.path, safe=_PATH_SAFE),
            quote(self.query, safe="=&"),
            quote(self.fragment, safe=""),
        ))


TRASH_SUFFIX = ".trash"


def check_backup_folder_name(name: str) -> str:
    """Return *name* if it is usable as a single directory under the backup home.

    Raises ``ValueError`` for names that would resolve elsewhere: empty,
    ``.``/``..``, absolute or drive-qualified, containing a path separator,
    or carrying the suffix reserved for directories pending deletion.
    """
    if not name or name in (".", ".."):
        msg = f"Invalid backup folder name: {name!r}"
        raise ValueError(msg)
    if "/" in name or "\\" in name or "\0" in name or ":" in name:
        msg = f"Backup folder name must not contain path separators: {name!r}"
        raise ValueError(msg)
    if name.endswith(TRASH_SUFFIX):
        msg = f"Backup folder name uses reserved suffix {TRASH_SUFFIX!r}: {name!r}"
        raise ValueError(msg)
    return name


class PathComparer:
    """Equality and key derivation for plain path-like identifiers."""

    def __init__(self, ignore_case: bool = not IS_CASE_SENSITIVE_FS) -> None:
        self.ignore_case = ignore_case

    def key(self, path: str) -> str:
        return path.lower() if self.ignore_case else path

    def is_equal(self, path_a: str, path_b: str) -> bool:
        if path_a == path_b:
            return True
        return self.ignore_case and path_a.lower() == path_b.lower()


class UriComparer:
    """Equality and dedup keys for URIs.

    Path case is ignored only for ``file:`` URIs on case-insensitive
    filesystems.  Authorities are always compared case-insensitively.
    """

    def __init__(self, ignore_path_case: bool = not IS_CASE_SENSITIVE_FS) -> None:
        self.ignore_path_case = ignore_path_case

    def ignores_path_case(self, uri: Uri) -> bool:
        return self.ignore_path_case and uri.scheme == FILE_SCHEME

    def comparison_key(self, uri: Uri) -> str:
        path = uri.path.lower() if self.ignores_path_case(uri) else uri.path
        return str(replace(uri, authority=uri.authority.lower(), path=path))

    def is_equal(self, uri_a: Uri, uri_b: Uri) -> bool:
        return self.comparison_key(uri_a) == self.comparison_key(uri_b)
