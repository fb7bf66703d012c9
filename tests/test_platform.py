"""Tests for platform mapping."""

import string

import hypothesis
import hypothesis.strategies as st
import pytest

import grrsetup.platform

_NAMES = st.text(alphabet=string.ascii_letters + string.digits + "_", max_size=12)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("x64", "amd64"),
        ("x86_64", "amd64"),
        ("AMD64", "amd64"),
        ("aarch64", "arm64"),
        ("arm64", "arm64"),
        ("armv7l", "arm"),
        ("arm", "arm"),
    ],
)
def test_map_arch(raw: str, expected: str) -> None:
    """map_arch translates known names and passes canonical ones through."""
    assert grrsetup.platform.map_arch(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("win32", "windows"),
        ("Windows", "windows"),
        ("linux", "linux"),
        ("Linux", "linux"),
        ("darwin", "darwin"),
    ],
)
def test_map_os(raw: str, expected: str) -> None:
    """map_os translates known names and passes canonical ones through."""
    assert grrsetup.platform.map_os(raw) == expected


def test_map_arch_unknown_passes_through() -> None:
    """Unknown architectures are returned unchanged rather than rejected."""
    assert grrsetup.platform.map_arch("riscv64") == "riscv64"


@hypothesis.given(raw=_NAMES)
def test_map_arch_idempotent(raw: str) -> None:
    """Mapping an already mapped arch changes nothing."""
    once = grrsetup.platform.map_arch(raw)
    assert grrsetup.platform.map_arch(once) == once


@hypothesis.given(raw=_NAMES)
def test_map_os_idempotent(raw: str) -> None:
    """Mapping an already mapped OS changes nothing."""
    once = grrsetup.platform.map_os(raw)
    assert grrsetup.platform.map_os(once) == once


def test_get_platform_uses_host(monkeypatch) -> None:
    """get_platform maps the values reported by the platform module."""
    monkeypatch.setattr(grrsetup.platform.platform, "system", lambda: "Windows")
    monkeypatch.setattr(grrsetup.platform.platform, "machine", lambda: "AMD64")
    plat = grrsetup.platform.get_platform()
    assert plat == grrsetup.platform.Platform(os="windows", arch="amd64")
    assert plat.exe_suffix == ".exe"
