"""Build metadata for koko.

The values are collected once at process start into an immutable
`BuildInfo` and handed to whatever reports them (the `koko version`
command). Release pipelines stamp the commit and build date through
KOKO_BUILD_COMMIT and KOKO_BUILD_DATE.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass

from koko import __version__

_UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class BuildInfo:
    """Version and build details of the running application."""

    version: str
    commit: str
    os_arch: str
    python_version: str
    build_date: str

    def as_rows(self) -> list[tuple[str, str]]:
        return [
            ("Version", self.version),
            ("Commit", self.commit),
            ("OS/Arch", self.os_arch),
            ("Python", self.python_version),
            ("Build date", self.build_date),
        ]


def load_build_info() -> BuildInfo:
    """Collect build metadata from the package and the environment."""
    return BuildInfo(
        version=__version__,
        commit=os.environ.get("KOKO_BUILD_COMMIT") or _UNKNOWN,
        os_arch=f"{platform.system().lower()}/{platform.machine().lower()}",
        python_version=platform.python_version(),
        build_date=os.environ.get("KOKO_BUILD_DATE") or _UNKNOWN,
    )
