"""Runner tool cache keyed by (tool, version, arch).

Layout mirrors the hosted runner tool cache so entries can be shared with
other setup actions:

    <root>/<tool>/<version>/<arch>/           cached directory
    <root>/<tool>/<version>/<arch>.complete   marker, written last
"""

import datetime
import json
import os
import pathlib
import shutil
import tempfile

import beartype
import filelock

import grrsetup.errors


@beartype.beartype
def get_cache_dpath() -> pathlib.Path:
    """Get the tool cache root, preferring the runner's own tool cache."""
    runner_cache = os.environ.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return pathlib.Path(runner_cache)
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return pathlib.Path(xdg_cache) / "grr-setup"
    return pathlib.Path.home() / ".cache" / "grr-setup"


class ToolCache:
    """Directory store for previously installed tools."""

    def __init__(self, root_dpath: pathlib.Path) -> None:
        self.root_dpath = root_dpath

    @beartype.beartype
    def find(self, tool: str, version: str, arch: str) -> pathlib.Path | None:
        """Return the cached directory, or None on a miss."""
        entry_dpath = self._entry_dpath(tool, version, arch)
        marker_fpath = _marker_fpath(entry_dpath)
        if entry_dpath.is_dir() and marker_fpath.is_file():
            return entry_dpath
        return None

    @beartype.beartype
    def cache_dir(
        self,
        src_dpath: pathlib.Path,
        tool: str,
        version: str,
        arch: str,
        checksum: str | None = None,
    ) -> pathlib.Path:
        """Copy src_dpath into the cache and return the cached directory.

        A complete entry for the same key is returned untouched.
        """
        entry_dpath = self._entry_dpath(tool, version, arch)
        marker_fpath = _marker_fpath(entry_dpath)

        try:
            entry_dpath.parent.mkdir(parents=True, exist_ok=True)
            lock = filelock.FileLock(entry_dpath.with_name(f"{arch}.lock"))
            with lock:
                if entry_dpath.is_dir() and marker_fpath.is_file():
                    return entry_dpath
                marker_fpath.unlink(missing_ok=True)
                if entry_dpath.exists():
                    shutil.rmtree(entry_dpath)
                shutil.copytree(src_dpath, entry_dpath)
                _write_marker(marker_fpath, checksum)
        except OSError as err:
            raise grrsetup.errors.CacheError(
                message=f"Could not cache {tool} {version} in {entry_dpath}: {err}",
                hint=f"Check that {self.root_dpath} is writable.",
            ) from None

        return entry_dpath

    def _entry_dpath(self, tool: str, version: str, arch: str) -> pathlib.Path:
        return self.root_dpath / tool / version / arch


def _marker_fpath(entry_dpath: pathlib.Path) -> pathlib.Path:
    return entry_dpath.with_name(f"{entry_dpath.name}.complete")


@beartype.beartype
def _write_marker(marker_fpath: pathlib.Path, checksum: str | None) -> None:
    """Write the completion marker atomically."""
    now = datetime.datetime.now(tz=datetime.UTC).replace(microsecond=0)
    data = {
        "checksum": checksum,
        "cached_at": now.isoformat().replace("+00:00", "Z"),
    }

    with tempfile.NamedTemporaryFile(
        mode="w", dir=marker_fpath.parent, delete=False, suffix=".tmp"
    ) as fd:
        json.dump(data, fd, indent=2)
        tmp_fpath = pathlib.Path(fd.name)

    os.replace(tmp_fpath, marker_fpath)
