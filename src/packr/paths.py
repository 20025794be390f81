"""Derived output paths.

Every path packr writes is a pure function of the configuration: the
configured output, its ``<stem>.min<ext>`` sibling, the ``.map`` file that
sits next to each of those, and the same names joined onto a destination
directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


def resolve_path(base: Path, relative: str) -> Path:
    return base / relative


def minified_path(path: Path) -> Path:
    """``dist/app.css`` -> ``dist/app.min.css``."""

    return path.with_name(f"{path.stem}.min{path.suffix}")


def sourcemap_path(path: Path, kind: str) -> Path:
    """Replace the extension with ``<kind>.map``: ``app.min.css`` -> ``app.min.css.map``."""

    return path.with_name(f"{path.stem}.{kind}.map")


def has_parent_segment(raw: str) -> bool:
    return ".." in raw.replace("\\", "/").split("/")


def is_inside(child: Path, parent: Path) -> bool:
    return child == parent or child.is_relative_to(parent)


class OutputPaths:
    """Paths for one step (``css`` or ``js``) of a build rooted at ``config_dir``."""

    def __init__(
        self,
        config_dir: Path,
        output: str,
        *,
        kind: str,
        destination: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.output = resolve_path(config_dir, output)
        self.dest_dir = resolve_path(config_dir, destination) if destination else None

    @property
    def minified(self) -> Path:
        return minified_path(self.output)

    @property
    def sourcemap(self) -> Path:
        return sourcemap_path(self.output, self.kind)

    @property
    def minified_sourcemap(self) -> Path:
        return sourcemap_path(self.minified, self.kind)

    def at_destination(self, path: Path) -> Path:
        """Location of ``path`` once copied into the destination directory."""

        if self.dest_dir is None:
            raise ValueError("No destination directory configured")
        return self.dest_dir / path.name

    def all(self) -> list[Path]:
        """Every path this step may produce, including destination copies."""

        produced = [self.output, self.minified, self.sourcemap, self.minified_sourcemap]
        if self.dest_dir is None:
            return produced
        return produced + [self.at_destination(path) for path in produced]


__all__ = [
    "resolve_path",
    "minified_path",
    "sourcemap_path",
    "has_parent_segment",
    "is_inside",
    "OutputPaths",
]
