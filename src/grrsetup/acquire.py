"""Binary download and installation."""

import dataclasses
import hashlib
import os
import pathlib

import beartype

import grrsetup.errors
import grrsetup.github
import grrsetup.platform

RELEASE_HOST = "https://github.com/grafana/grizzly/releases/download"
TOOL_NAME = "grr"


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class ReleaseAsset:
    """Download location of one build of the tool."""

    url: str
    version: str
    """Resolved version tag (never "latest")."""
    platform: grrsetup.platform.Platform


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class InstalledBinary:
    """An executable on disk. bin_dpath is what goes on PATH."""

    bin_dpath: pathlib.Path
    exe_name: str

    @property
    def binary_fpath(self) -> pathlib.Path:
        return self.bin_dpath / self.exe_name


@beartype.beartype
def get_exe_name(platform: grrsetup.platform.Platform, tool: str = TOOL_NAME) -> str:
    """Canonical executable name on this platform."""
    return f"{tool}{platform.exe_suffix}"


@beartype.beartype
def get_download_url(
    version: str,
    platform: grrsetup.platform.Platform,
    *,
    release_host: str = RELEASE_HOST,
    tool: str = TOOL_NAME,
) -> str:
    """Build the download URL for a version and platform."""
    filename = f"{tool}-{platform.os}-{platform.arch}"
    return f"{release_host.rstrip('/')}/{version}/{filename}"


@beartype.beartype
def make_asset(
    version: str,
    platform: grrsetup.platform.Platform,
    *,
    release_host: str = RELEASE_HOST,
) -> ReleaseAsset:
    """Describe the asset to fetch for a resolved version."""
    url = get_download_url(version, platform, release_host=release_host)
    return ReleaseAsset(url=url, version=version, platform=platform)


@beartype.beartype
def acquire_binary(
    asset: ReleaseAsset,
    client: grrsetup.github.GitHubClient,
    dest_dpath: pathlib.Path,
    tool: str = TOOL_NAME,
) -> InstalledBinary:
    """Download an asset into dest_dpath and make it executable as `tool`."""
    exe_name = get_exe_name(asset.platform, tool)
    download_fpath = dest_dpath / f"{exe_name}.download"
    client.download_asset(asset.url, download_fpath)

    try:
        os.chmod(download_fpath, 0o755)
        os.replace(download_fpath, dest_dpath / exe_name)
    except OSError as err:
        raise grrsetup.errors.AcquisitionError(
            message=f"Could not install {download_fpath} as {exe_name}: {err}",
            url=asset.url,
        ) from None

    return InstalledBinary(bin_dpath=dest_dpath, exe_name=exe_name)


@beartype.beartype
def compute_sha256(binary_fpath: pathlib.Path) -> str:
    """Compute SHA-256 checksum of a file."""
    hasher = hashlib.sha256()
    with binary_fpath.open("rb") as fd:
        while True:
            chunk = fd.read(1024 * 1024)
            if not chunk:
                break
            hasher.update(chunk)
    return f"sha256:{hasher.hexdigest()}"
