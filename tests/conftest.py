"""Shared fixtures."""

import collections.abc
import pathlib
import sys

import pytest


@pytest.fixture
def calls_fpath(tmp_path: pathlib.Path) -> pathlib.Path:
    """File where fake grr executables log their arguments."""
    return tmp_path / "grr-calls.log"


@pytest.fixture
def fake_grr_script(
    calls_fpath: pathlib.Path,
) -> collections.abc.Callable[..., str]:
    """Return source for an executable that mimics `grr config set`.

    It logs its arguments, echoes to both streams and exits with 3 when asked
    to set fail_key.
    """
    if sys.platform == "win32":
        pytest.skip("fake grr relies on a shebang")

    def make(fail_key: str | None = None) -> str:
        return (
            f"#!{sys.executable}\n"
            "import sys\n"
            f"with open({str(calls_fpath)!r}, 'a') as fd:\n"
            "    fd.write(' '.join(sys.argv[1:]) + '\\n')\n"
            "print('set ' + sys.argv[3])\n"
            "print('note ' + sys.argv[3], file=sys.stderr)\n"
            f"sys.exit(3 if sys.argv[3] == {fail_key!r} else 0)\n"
        )

    return make
