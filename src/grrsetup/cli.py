"""CLI definition using tyro."""

import dataclasses
import os
import pathlib
import sys
import tempfile

import beartype
import tyro

import grrsetup.acquire
import grrsetup.actions
import grrsetup.cache
import grrsetup.config
import grrsetup.errors
import grrsetup.github
import grrsetup.platform
import grrsetup.resolve

REPO = "grafana/grizzly"

_FALSE_VALUES = {"false", "0", "no", "off"}


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class Setup:
    """Install grr, put it on PATH and optionally configure it.

    Inside GitHub Actions every option defaults to the matching step input.
    """

    version: str = "latest"
    """Release tag to install, or "latest"."""

    cache: bool = True
    """Reuse and populate the runner tool cache."""

    verbose: bool = False
    """Show detailed output."""

    grafana_url: str | None = None
    grafana_user: str | None = None
    grafana_token: str | None = None
    grafana_insecure_skip_verify: str | None = None
    grafana_tls_host: str | None = None
    mimir_address: str | None = None
    mimir_tenant_id: str | None = None
    mimir_api_key: str | None = None
    mimir_auth_token: str | None = None
    synthetic_monitoring_token: str | None = None
    synthetic_monitoring_stack_id: str | None = None
    synthetic_monitoring_metrics_id: str | None = None
    synthetic_monitoring_logs_id: str | None = None
    synthetic_monitoring_url: str | None = None
    targets: str | None = None
    output_format: str | None = None
    only_spec: str | None = None

    @staticmethod
    def from_env() -> "Setup":
        """Read defaults from GitHub Actions INPUT_* variables."""
        values: dict[str, object] = {}
        for field in dataclasses.fields(Setup):
            raw = _get_input(field.name.replace("_", "-"))
            if raw is None:
                continue
            if field.name in {"cache", "verbose"}:
                values[field.name] = raw.lower() not in _FALSE_VALUES
            else:
                values[field.name] = raw
        return Setup(**values)

    def config_inputs(self) -> dict[str, str | None]:
        """Text inputs keyed by step input name (e.g. "grafana-url")."""
        inputs: dict[str, str | None] = {}
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if value is None or isinstance(value, str):
                inputs[field.name.replace("_", "-")] = value
        return inputs


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class SetupResult:
    """Outcome of a successful setup."""

    version: str
    installed: grrsetup.acquire.InstalledBinary
    cache_hit: bool
    configured_keys: tuple[str, ...]


@beartype.beartype
def run_setup(
    cmd: Setup,
    client: grrsetup.github.GitHubClient,
    platform: grrsetup.platform.Platform,
    tool_cache: grrsetup.cache.ToolCache | None,
    schema: grrsetup.config.ConfigSchema = grrsetup.config.DEFAULT_SCHEMA,
) -> SetupResult:
    """Resolve, install, publish and configure grr."""
    tool = grrsetup.acquire.TOOL_NAME
    exe_name = grrsetup.acquire.get_exe_name(platform)

    is_latest = cmd.version == grrsetup.resolve.LATEST
    if is_latest:
        print('Identifying "latest" version...')
    version = grrsetup.resolve.resolve_version(cmd.version, client, REPO)
    if is_latest:
        print(f"Latest version is {version}")

    cached_dpath = None
    if tool_cache is not None:
        cached_dpath = tool_cache.find(tool, version, platform.arch)

    if cached_dpath is not None:
        print(f"Using grr {version} from cache")
        installed = grrsetup.acquire.InstalledBinary(
            bin_dpath=cached_dpath, exe_name=exe_name
        )
    else:
        installed = _download(cmd, client, platform, version, tool_cache)

    print(f"Adding grr to PATH: {installed.bin_dpath}")
    grrsetup.actions.add_path(installed.bin_dpath)

    config_map = grrsetup.config.build_config_map(cmd.config_inputs(), schema)
    if config_map:
        print(f"Configuring grr: {', '.join(config_map)}")
        grrsetup.config.write_config(
            config_map, exe_name, stdout=_forward_stdout, stderr=_forward_stderr
        )

    grrsetup.actions.set_output("version", version)
    grrsetup.actions.set_output("cache-hit", str(cached_dpath is not None).lower())

    return SetupResult(
        version=version,
        installed=installed,
        cache_hit=cached_dpath is not None,
        configured_keys=tuple(config_map),
    )


@beartype.beartype
def main() -> None:
    """Main entry point."""
    cmd = tyro.cli(Setup, default=Setup.from_env())

    token = os.environ.get("GITHUB_TOKEN") or _get_input("github-token")
    client = grrsetup.github.GitHubClient(token=token)
    platform = grrsetup.platform.get_platform()
    tool_cache = None
    if cmd.cache:
        tool_cache = grrsetup.cache.ToolCache(grrsetup.cache.get_cache_dpath())

    try:
        run_setup(cmd, client, platform, tool_cache)
    except grrsetup.errors.GrrSetupError as err:
        grrsetup.actions.error(str(err))
        sys.exit(1)


@beartype.beartype
def _download(
    cmd: Setup,
    client: grrsetup.github.GitHubClient,
    platform: grrsetup.platform.Platform,
    version: str,
    tool_cache: grrsetup.cache.ToolCache | None,
) -> grrsetup.acquire.InstalledBinary:
    """Download grr and, when caching, move it into the tool cache."""
    asset = grrsetup.acquire.make_asset(version, platform)
    print(f"Downloading grr {version} from {asset.url}")
    installed = grrsetup.acquire.acquire_binary(asset, client, _make_download_dpath())

    try:
        checksum = grrsetup.acquire.compute_sha256(installed.binary_fpath)
    except OSError as err:
        raise grrsetup.errors.AcquisitionError(
            message=f"Could not read {installed.binary_fpath}: {err}", url=asset.url
        ) from None
    if cmd.verbose:
        print(f"  binary: {installed.binary_fpath}")
        print(f"  checksum: {checksum}")

    if tool_cache is None:
        return installed

    print(f"Caching grr {version}")
    try:
        cached_dpath = tool_cache.cache_dir(
            installed.bin_dpath,
            grrsetup.acquire.TOOL_NAME,
            version,
            platform.arch,
            checksum=checksum,
        )
    except grrsetup.errors.CacheError as err:
        grrsetup.actions.warn(str(err))
        return installed

    return dataclasses.replace(installed, bin_dpath=cached_dpath)


@beartype.beartype
def _make_download_dpath() -> pathlib.Path:
    """Create a fresh directory for the download, in RUNNER_TEMP if set."""
    runner_temp = os.environ.get("RUNNER_TEMP") or None
    try:
        return pathlib.Path(tempfile.mkdtemp(prefix="grr-", dir=runner_temp))
    except OSError as err:
        raise grrsetup.errors.AcquisitionError(
            message=f"Could not create a download directory: {err}",
            hint="Check that RUNNER_TEMP points at a writable directory.",
        ) from None


def _get_input(name: str) -> str | None:
    """Read a step input the way the Actions runner exports it."""
    value = os.environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()
    return value or None


def _forward_stdout(text: str) -> None:
    sys.stdout.write(text)


def _forward_stderr(text: str) -> None:
    sys.stderr.write(text)
