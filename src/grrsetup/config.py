"""Pre-seeding grr's configuration through `grr config set`."""

import collections.abc
import dataclasses
import pathlib
import subprocess

import beartype

import grrsetup.errors

Sink = collections.abc.Callable[[str], None]


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class ConfigOption:
    """One recognized setup input and the grr config key it sets."""

    input_name: str
    """Input name as given to the setup step (e.g. "grafana-url")."""

    key: str
    """Dot-scoped grr config key (e.g. "grafana.url")."""


@beartype.beartype
@dataclasses.dataclass(frozen=True)
class ConfigSchema:
    """Allow-list of inputs that map to grr config keys, in apply order."""

    options: tuple[ConfigOption, ...]

    @property
    def input_names(self) -> tuple[str, ...]:
        return tuple(option.input_name for option in self.options)


DEFAULT_SCHEMA = ConfigSchema(
    options=(
        ConfigOption("grafana-url", "grafana.url"),
        ConfigOption("grafana-user", "grafana.user"),
        ConfigOption("grafana-token", "grafana.token"),
        ConfigOption("grafana-insecure-skip-verify", "grafana.insecure-skip-verify"),
        ConfigOption("grafana-tls-host", "grafana.tls-host"),
        ConfigOption("mimir-address", "mimir.address"),
        ConfigOption("mimir-tenant-id", "mimir.tenant-id"),
        ConfigOption("mimir-api-key", "mimir.api-key"),
        ConfigOption("mimir-auth-token", "mimir.auth-token"),
        ConfigOption("synthetic-monitoring-token", "synthetic-monitoring.token"),
        ConfigOption("synthetic-monitoring-stack-id", "synthetic-monitoring.stack-id"),
        ConfigOption(
            "synthetic-monitoring-metrics-id", "synthetic-monitoring.metrics-id"
        ),
        ConfigOption("synthetic-monitoring-logs-id", "synthetic-monitoring.logs-id"),
        ConfigOption("synthetic-monitoring-url", "synthetic-monitoring.url"),
        ConfigOption("targets", "targets"),
        ConfigOption("output-format", "output-format"),
        ConfigOption("only-spec", "only-spec"),
    )
)


@beartype.beartype
def build_config_map(
    inputs: collections.abc.Mapping[str, str | None],
    schema: ConfigSchema = DEFAULT_SCHEMA,
) -> dict[str, str]:
    """Select recognized, non-empty inputs and key them by grr config key.

    The result follows schema order, not input order. Unknown inputs are
    dropped without complaint.
    """
    config_map = {}
    for option in schema.options:
        value = inputs.get(option.input_name)
        if not value:
            continue
        config_map[option.key] = value
    return config_map


@beartype.beartype
def set_config(
    exe: str | pathlib.Path,
    key: str,
    value: str,
    *,
    stdout: Sink | None = None,
    stderr: Sink | None = None,
) -> int:
    """Run `exe config set key value` and return its exit code.

    Output of the child is forwarded verbatim to the given sinks; a stream
    with no sink is discarded.
    """
    args = [str(exe), "config", "set", key, value]
    try:
        with subprocess.Popen(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE if stdout else subprocess.DEVNULL,
            stderr=subprocess.PIPE if stderr else subprocess.DEVNULL,
            text=True,
        ) as proc:
            out, errs = proc.communicate()
    except OSError as err:
        raise grrsetup.errors.ConfigWriteError(
            message=f"Could not run {exe} to set config key {key}: {err}",
            hint="Make sure grr was installed and is on PATH.",
            key=key,
        ) from None

    if stdout and out:
        stdout(out)
    if stderr and errs:
        stderr(errs)
    return proc.returncode


@beartype.beartype
def write_config(
    config_map: collections.abc.Mapping[str, str],
    exe: str | pathlib.Path = "grr",
    *,
    stdout: Sink | None = None,
    stderr: Sink | None = None,
) -> None:
    """Apply config_map one key at a time, stopping at the first failure.

    grr rewrites a single settings file on every call, so keys are applied
    strictly one after another. Keys set before a failure stay set.
    """
    for key, value in config_map.items():
        exit_code = set_config(exe, key, value, stdout=stdout, stderr=stderr)
        if exit_code != 0:
            raise grrsetup.errors.ConfigWriteError.make(key, exit_code)
