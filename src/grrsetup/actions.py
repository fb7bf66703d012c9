"""GitHub Actions runner integration: PATH and step outputs."""

import os
import pathlib
import sys

import beartype

import grrsetup.errors


@beartype.beartype
def add_path(dpath: pathlib.Path) -> None:
    """Expose dpath to this process and to later steps of the job.

    Adding the same directory twice is a no-op.
    """
    entry = str(dpath)
    current = os.environ.get("PATH", "")
    if entry not in current.split(os.pathsep):
        os.environ["PATH"] = os.pathsep.join(p for p in (entry, current) if p)

    github_path = os.environ.get("GITHUB_PATH")
    if not github_path:
        warn(f"GITHUB_PATH not set; {entry} is only on PATH for this process.")
        return

    path_fpath = pathlib.Path(github_path)
    try:
        if path_fpath.exists() and entry in path_fpath.read_text().splitlines():
            return
        with path_fpath.open("a") as fd:
            fd.write(f"{entry}\n")
    except OSError as err:
        raise grrsetup.errors.PublishError(
            message=f"Could not add {entry} to GITHUB_PATH ({path_fpath}): {err}",
        ) from None


@beartype.beartype
def set_output(name: str, value: str) -> None:
    """Set a step output. Ignored outside of GitHub Actions."""
    github_output = os.environ.get("GITHUB_OUTPUT")
    if not github_output:
        return
    try:
        with open(github_output, "a") as fd:
            fd.write(f"{name}={value}\n")
    except OSError as err:
        raise grrsetup.errors.PublishError(
            message=f"Could not set output {name} in {github_output}: {err}",
        ) from None


@beartype.beartype
def warn(message: str) -> None:
    print(f"::warning::{message}")


@beartype.beartype
def error(message: str) -> None:
    """Report a job failure annotation on stderr."""
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    print(f"::error::{escaped}", file=sys.stderr)
