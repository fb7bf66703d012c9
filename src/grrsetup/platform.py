"""OS/arch detection and normalization to grr release asset names."""

import dataclasses
import platform

import beartype

_OS_NAMES = {
    "win32": "windows",
    "cygwin": "windows",
    "msys": "windows",
}

_ARCH_NAMES = {
    "x64": "amd64",
    "x86_64": "amd64",
    "aarch64": "arm64",
    "armv6l": "arm",
    "armv7l": "arm",
    "i386": "386",
    "i686": "386",
    "x32": "386",
}


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class Platform:
    """Host platform in release naming (e.g. linux/amd64)."""

    os: str
    arch: str

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self.os == "windows" else ""


@beartype.beartype
def map_os(raw: str) -> str:
    """Map a raw OS name to its release name.

    Names missing from the table (linux, darwin, ...) already match and are
    returned lowercased.
    """
    name = raw.lower()
    return _OS_NAMES.get(name, name)


@beartype.beartype
def map_arch(raw: str) -> str:
    """Map a raw machine name to its release name.

    Names missing from the table (amd64, arm64, ...) are returned lowercased.
    An unknown value yields an asset name that simply does not exist upstream.
    """
    name = raw.lower()
    return _ARCH_NAMES.get(name, name)


@beartype.beartype
def get_platform() -> Platform:
    """Detect the host platform."""
    return Platform(os=map_os(platform.system()), arch=map_arch(platform.machine()))
