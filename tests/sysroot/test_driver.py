"""
Tests for the cargo build driver.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from sysrootkit.core.exceptions import BuildToolNotFoundError, CompileError
from sysrootkit.sysroot.crates import CrateTier
from sysrootkit.sysroot.driver import (
    EMBED_BITCODE_FLAG,
    BuildDriver,
    compose_rustflags,
    default_cargo,
    resolve_target_arg,
)
from sysrootkit.sysroot.options import SysrootConfig


def make_config(tmp_path, target="x86_64-unknown-uefi", flags=()):
    return SysrootConfig(
        tier=CrateTier.ALLOC,
        output=tmp_path / "sysroot",
        target=target,
        rustc_flags=tuple(flags),
    )


class TestComposeRustflags:
    def test_embed_bitcode_only(self):
        assert compose_rustflags([], environ={}) == EMBED_BITCODE_FLAG

    def test_order(self):
        flags = compose_rustflags(
            ["-Copt-level=z", "-Cpanic=abort"],
            environ={"RUSTFLAGS": "-Ctarget-cpu=native"},
        )

        assert flags == (
            "-Cembed-bitcode=yes -Ctarget-cpu=native -Copt-level=z -Cpanic=abort"
        )

    def test_blank_inherited_ignored(self):
        assert compose_rustflags(["-g"], environ={"RUSTFLAGS": "  "}) == (
            "-Cembed-bitcode=yes -g"
        )


class TestResolveTargetArg:
    def test_builtin_passthrough(self, tmp_path):
        assert resolve_target_arg(make_config(tmp_path)) == "x86_64-unknown-uefi"

    def test_spec_path_canonicalized(self, tmp_path, monkeypatch):
        spec = tmp_path / "specs" / "kernel.json"
        spec.parent.mkdir()
        spec.write_text("{}")
        monkeypatch.chdir(tmp_path)

        arg = resolve_target_arg(make_config(tmp_path, target="specs/kernel.json"))

        assert arg == str(spec.resolve())
        assert Path(arg).is_absolute()

    def test_missing_spec_falls_back(self, tmp_path):
        config = make_config(tmp_path, target="missing/kernel.json")

        assert resolve_target_arg(config) == "missing/kernel.json"


class TestBuildDriver:
    def test_default_cargo_from_env(self, monkeypatch):
        monkeypatch.setenv("CARGO", "/home/user/.cargo/bin/cargo")
        assert default_cargo() == "/home/user/.cargo/bin/cargo"
        assert BuildDriver().cargo == "/home/user/.cargo/bin/cargo"

    def test_default_cargo_fallback(self, clean_rust_env):
        assert BuildDriver().cargo == "cargo"

    def test_command(self, tmp_path):
        config = make_config(tmp_path)
        manifest = config.output / "Cargo.toml"

        cmd = BuildDriver("cargo").command(manifest, config)

        assert cmd == [
            "cargo",
            "rustc",
            "--release",
            "--target",
            "x86_64-unknown-uefi",
            "--target-dir",
            str(config.output / "target"),
            "--manifest-path",
            str(manifest),
            "--",
            "-Z",
            "force-unstable-if-unmarked",
        ]

    @patch("sysrootkit.sysroot.driver.subprocess.run")
    def test_compile_success(self, mock_run, tmp_path, monkeypatch):
        monkeypatch.setenv("RUSTFLAGS", "-Cdebuginfo=1")
        mock_run.return_value = subprocess.CompletedProcess([], 0)
        config = make_config(tmp_path, flags=["-Copt-level=s"])

        BuildDriver("cargo").compile(config.output / "Cargo.toml", config)

        env = mock_run.call_args.kwargs["env"]
        assert env["RUSTFLAGS"] == "-Cembed-bitcode=yes -Cdebuginfo=1 -Copt-level=s"
        assert mock_run.call_args.kwargs["check"] is False

    @patch("sysrootkit.sysroot.driver.subprocess.run")
    def test_compile_failure_exit_code(self, mock_run, tmp_path):
        mock_run.return_value = subprocess.CompletedProcess([], 101)
        config = make_config(tmp_path)

        with pytest.raises(CompileError, match="101") as exc_info:
            BuildDriver("cargo").compile(config.output / "Cargo.toml", config)

        assert exc_info.value.exit_code == 101

    @patch("sysrootkit.sysroot.driver.subprocess.run")
    def test_compile_killed_by_signal(self, mock_run, tmp_path):
        mock_run.return_value = subprocess.CompletedProcess([], -9)
        config = make_config(tmp_path)

        with pytest.raises(CompileError, match="signal") as exc_info:
            BuildDriver("cargo").compile(config.output / "Cargo.toml", config)

        assert exc_info.value.exit_code is None

    @patch("sysrootkit.sysroot.driver.subprocess.run")
    def test_cargo_not_found(self, mock_run, tmp_path):
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory")
        config = make_config(tmp_path)

        with pytest.raises(BuildToolNotFoundError) as exc_info:
            BuildDriver("cargo-missing").compile(config.output / "Cargo.toml", config)

        assert not isinstance(exc_info.value, CompileError)
        assert exc_info.value.tool == "cargo-missing"
