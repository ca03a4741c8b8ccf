"""
Tests for CLI argument parser and the sysroot command.
"""

import os
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest
import toml

from sysrootkit.cli.parser import CLI, main
from tests.fixtures.toolchains import FakeCargo


@pytest.fixture
def toolchain(fake_locator):
    """Patch cargo and rustc with fakes for the duration of a test."""
    cargo = FakeCargo()
    with patch("sysrootkit.sysroot.driver.subprocess.run", cargo), patch(
        "sysrootkit.sysroot.builder.HostToolchainLocator", return_value=fake_locator
    ):
        yield cargo


@pytest.fixture
def in_project(cargo_project_with_sysroot, monkeypatch):
    """Run from the directory of a project with sysroot metadata."""
    project_dir = cargo_project_with_sysroot.parent
    monkeypatch.chdir(project_dir)
    return project_dir


@pytest.fixture
def in_empty_dir(tmp_path, monkeypatch):
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_creation(self):
        cli = CLI()
        assert cli.parser is not None

    def test_version_flag(self, capsys):
        cli = CLI()

        with pytest.raises(SystemExit) as exc_info:
            cli.run(["--version"])

        assert exc_info.value.code == 0
        assert "SysrootKit" in capsys.readouterr().out

    def test_defaults(self):
        args = CLI().parse_args([])

        assert args.target is None
        assert args.tier is None
        assert args.output is None
        assert args.manifest_path is None
        assert args.feature == []
        assert args.rustc_flag == []
        assert args.no_config is False
        assert args.clean is False

    def test_cargo_subcommand_name_stripped(self):
        args = CLI().parse_args(["sysroot", "--target", "x86_64-unknown-uefi"])

        assert args.target == "x86_64-unknown-uefi"

    def test_all_options(self):
        args = CLI().parse_args(
            [
                "--manifest-path",
                "kernel/Cargo.toml",
                "--sysroot-dir",
                "out",
                "--target",
                "specs/x86_64-kernel.json",
                "--rust-src-dir",
                "rust/library",
                "--tier",
                "core",
                "--feature",
                "mem",
                "--feature",
                "no-asm",
                "--rustc-flag",
                "-Copt-level=s",
                "--no-config",
                "--clean",
            ]
        )

        assert args.manifest_path == Path("kernel/Cargo.toml")
        assert args.output == Path("out")
        assert args.target == "specs/x86_64-kernel.json"
        assert args.rust_src_dir == Path("rust/library")
        assert args.tier == "core"
        assert args.feature == ["mem", "no-asm"]
        assert args.rustc_flag == ["-Copt-level=s"]
        assert args.no_config is True
        assert args.clean is True

    def test_invalid_tier_rejected(self):
        with pytest.raises(SystemExit) as exc_info:
            CLI().parse_args(["--tier", "proc_macro"])

        assert exc_info.value.code == 2


class TestTargetResolution:
    def test_no_manifest_no_target(self, in_empty_dir, toolchain, capsys):
        result = CLI().run([])

        assert result == 1
        assert "No target specified" in capsys.readouterr().err
        assert toolchain.calls == []
        assert not (in_empty_dir / "target").exists()

    def test_manifest_without_metadata(
        self, minimal_cargo_project, monkeypatch, toolchain, capsys
    ):
        monkeypatch.chdir(minimal_cargo_project.parent)

        result = CLI().run([])

        assert result == 1
        assert "Missing package metadata" in capsys.readouterr().err
        assert toolchain.calls == []

    def test_metadata_not_a_table(self, in_empty_dir, toolchain, capsys):
        (in_empty_dir / "Cargo.toml").write_text(
            '[package]\nname = "kernel"\nversion = "0.1.0"\n\n'
            '[package.metadata]\ncargo-sysroot = "my-target.json"\n'
        )

        result = CLI().run([])

        assert result == 1
        assert "cargo-sysroot metadata is not a table" in capsys.readouterr().err
        assert toolchain.calls == []

    def test_target_from_metadata(self, in_project, toolchain):
        assert CLI().run(["--quiet"]) == 0

        spec = (in_project / "x86_64-kernel.json").resolve()
        assert toolchain.last_cmd[toolchain.last_cmd.index("--target") + 1] == str(
            spec
        )
        lib = in_project / "target" / "sysroot" / "lib" / "rustlib" / "x86_64-kernel"
        assert (lib / "lib" / "liballoc-0123abcd.rlib").exists()

    def test_flag_overrides_metadata(self, in_project, toolchain):
        assert CLI().run(["--quiet", "--target", "x86_64-unknown-uefi"]) == 0

        assert "x86_64-unknown-uefi" in toolchain.last_cmd

    def test_missing_target_spec(self, in_empty_dir, toolchain, capsys):
        result = CLI().run(["--target", "missing.json"])

        assert result == 1
        assert "Target specification" in capsys.readouterr().err
        assert toolchain.calls == []


class TestSysrootCommand:
    def test_builds_and_writes_cargo_config(self, in_project, toolchain, capsys):
        assert CLI().run([]) == 0

        sysroot = (in_project / "target" / "sysroot").resolve()
        config = toml.load(in_project / ".cargo" / "config.toml")
        assert config["build"]["target"] == "x86_64-kernel.json"
        assert config["build"]["rustflags"] == ["--sysroot", str(sysroot)]
        assert "Sysroot built" in capsys.readouterr().out

    def test_profile_copied(self, in_project, toolchain):
        CLI().run(["--quiet"])

        manifest = toml.load(in_project / "target" / "sysroot" / "Cargo.toml")
        assert manifest["profile"]["release"]["lto"] is True
        assert manifest["profile"]["dev"] == {"panic": "abort"}

    def test_existing_cargo_config_kept(self, in_project, toolchain):
        (in_project / ".cargo").mkdir()
        (in_project / ".cargo" / "config.toml").write_text("# mine\n")

        assert CLI().run(["--quiet"]) == 0

        assert (in_project / ".cargo" / "config.toml").read_text() == "# mine\n"

    def test_no_config(self, in_project, toolchain):
        assert CLI().run(["--quiet", "--no-config"]) == 0

        assert not (in_project / ".cargo").exists()

    def test_tier_and_features(self, in_project, toolchain):
        assert CLI().run(["-q", "--tier", "std", "--feature", "mem"]) == 0

        manifest = toml.load(in_project / "target" / "sysroot" / "Cargo.toml")
        assert manifest["dependencies"]["std"]["features"] == [
            "compiler-builtins-mem"
        ]

    def test_unknown_feature(self, in_project, toolchain, capsys):
        result = CLI().run(["--feature", "simd"])

        assert result == 1
        assert "Unknown feature 'simd'" in capsys.readouterr().err
        assert toolchain.calls == []

    def test_rustc_flags(self, in_project, toolchain, monkeypatch):
        monkeypatch.setenv("RUSTFLAGS", "-Cdebuginfo=1")

        CLI().run(["-q", "--rustc-flag", "-Copt-level=s"])

        assert toolchain.last_env["RUSTFLAGS"] == (
            "-Cembed-bitcode=yes -Cdebuginfo=1 -Copt-level=s"
        )

    def test_compile_failure(self, in_project, fake_locator, capsys):
        with patch(
            "sysrootkit.sysroot.driver.subprocess.run",
            return_value=subprocess.CompletedProcess([], 101),
        ), patch(
            "sysrootkit.sysroot.builder.HostToolchainLocator",
            return_value=fake_locator,
        ):
            result = CLI().run([])

        assert result == 1
        assert "101" in capsys.readouterr().err
        assert not (in_project / ".cargo").exists()

    def test_clean_removes_old_sysroot(self, in_project, toolchain):
        stale = in_project / "target" / "sysroot" / "stale.txt"
        stale.parent.mkdir(parents=True)
        stale.write_text("old")

        assert CLI().run(["-q", "--clean"]) == 0

        assert not stale.exists()
        assert (in_project / "target" / "sysroot" / "Cargo.toml").exists()

    def test_clean_skipped_when_invalid(self, in_project, toolchain):
        stale = in_project / "out" / "stale.txt"
        stale.parent.mkdir()
        stale.write_text("old")

        result = CLI().run(
            ["-q", "--clean", "--output", "out", "--rust-src-dir", "missing"]
        )

        assert result == 1
        assert stale.exists()

    def test_keyboard_interrupt(self, in_project):
        with patch(
            "sysrootkit.cli.parser.SysrootBuilder.build",
            side_effect=KeyboardInterrupt,
        ):
            assert CLI().run(["-q"]) == 130


class TestSettingsFile:
    def test_defaults_from_settings(self, in_empty_dir, toolchain):
        (in_empty_dir / "sysrootkit.yaml").write_text(
            "target: x86_64-unknown-uefi\n"
            "tier: core\n"
            "output: build/sysroot\n"
            "rustc_flags: ['-Cpanic=abort']\n"
            "no_config: true\n"
        )

        assert CLI().run(["-q"]) == 0

        sysroot = in_empty_dir / "build" / "sysroot"
        manifest = toml.load(sysroot / "Cargo.toml")
        assert list(manifest["dependencies"]) == ["core"]
        assert toolchain.last_env["RUSTFLAGS"].endswith("-Cpanic=abort")
        assert not (in_empty_dir / ".cargo").exists()

    def test_flags_override_settings(self, in_empty_dir, toolchain):
        (in_empty_dir / "sysrootkit.yaml").write_text(
            "target: x86_64-unknown-uefi\ntier: core\n"
        )

        assert CLI().run(["-q", "--tier", "alloc", "--no-config"]) == 0

        manifest = toml.load(in_empty_dir / "target" / "sysroot" / "Cargo.toml")
        assert list(manifest["dependencies"]) == ["alloc"]

    def test_explicit_config_file(self, tmp_path, in_empty_dir, toolchain):
        settings = tmp_path / "conf" / "sysroot.yaml"
        settings.parent.mkdir()
        settings.write_text("target: x86_64-unknown-uefi\noutput: out\n")

        assert CLI().run(["-q", "--no-config", "--config", str(settings)]) == 0

        # Relative to the settings file, not the working directory
        assert (tmp_path / "conf" / "out" / "Cargo.toml").exists()

    def test_explicit_config_missing(self, in_empty_dir, capsys):
        result = CLI().run(["--config", "nope.yaml"])

        assert result == 1
        assert "Configuration file not found" in capsys.readouterr().err

    def test_unknown_setting(self, in_empty_dir, capsys):
        (in_empty_dir / "sysrootkit.yaml").write_text("targt: x86_64-unknown-uefi\n")

        assert CLI().run([]) == 1
        assert "Unknown settings: targt" in capsys.readouterr().err


def test_main_exit_code(in_empty_dir, monkeypatch):
    monkeypatch.setattr("sys.argv", ["cargo-sysroot", "sysroot"])

    with pytest.raises(SystemExit) as exc_info:
        main()

    assert exc_info.value.code == 1
    assert os.listdir(in_empty_dir) == []
