"""
SysrootKit CLI argument parser.

This module implements the ``cargo sysroot`` command line using argparse.
Installed as ``cargo-sysroot`` it runs as a cargo subcommand, in which case
cargo passes ``sysroot`` as the first argument.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from sysrootkit.config.cargo_config import generate_cargo_config
from sysrootkit.config.project import load_project_manifest
from sysrootkit.config.settings import (
    DEFAULT_SETTINGS_FILE,
    ConfigError,
    load_settings,
)
from sysrootkit.core.exceptions import MissingTargetError, SysrootKitError
from sysrootkit.core.filesystem import remove_tree
from sysrootkit.sysroot.builder import DEFAULT_OUTPUT, SysrootBuilder
from sysrootkit.sysroot.crates import CrateTier, Feature
from sysrootkit.cli.utils import format_success_message, print_error, safe_print

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("sysrootkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

SUBCOMMAND_NAME = "sysroot"
DEFAULT_MANIFEST = Path("Cargo.toml")
DEFAULT_TIER = CrateTier.ALLOC


class CLI:
    """SysrootKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="cargo sysroot",
            description="Compile the Rust sysroot crates for a custom target",
            epilog=(
                "The target defaults to package.metadata.cargo-sysroot.target "
                "in Cargo.toml"
            ),
        )

        parser.add_argument(
            "--version", action="version", version=f"SysrootKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help=f"Path to settings file (default: ./{DEFAULT_SETTINGS_FILE})",
        )
        parser.add_argument(
            "--manifest-path",
            type=Path,
            metavar="PATH",
            help="Path to Cargo.toml (default: ./Cargo.toml)",
        )
        parser.add_argument(
            "--output",
            "--sysroot-dir",
            dest="output",
            type=Path,
            metavar="DIR",
            help=f"Path to sysroot directory (default: ./{DEFAULT_OUTPUT.as_posix()})",
        )
        parser.add_argument(
            "--target",
            metavar="TARGET",
            help="Target triple or target specification JSON to build for",
        )
        parser.add_argument(
            "--rust-src-dir",
            type=Path,
            metavar="DIR",
            help="Path to the rust sources (default: rustup's rust-src component)",
        )
        parser.add_argument(
            "--tier",
            choices=[t.value for t in CrateTier],
            help=f"Sysroot crate to build (default: {DEFAULT_TIER.value})",
        )
        parser.add_argument(
            "--feature",
            action="append",
            default=[],
            metavar="NAME",
            help="compiler_builtins feature: mem, c or no-asm (repeatable)",
        )
        parser.add_argument(
            "--rustc-flag",
            action="append",
            default=[],
            metavar="FLAG",
            help="Extra flag appended to RUSTFLAGS (repeatable)",
        )
        parser.add_argument(
            "--no-config",
            action="store_true",
            help="Disable .cargo/config.toml generation",
        )
        parser.add_argument(
            "--clean",
            action="store_true",
            help="Remove the sysroot directory before building",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        args = list(sys.argv[1:] if args is None else args)
        # cargo invokes `cargo-sysroot sysroot ...`
        if args and args[0] == SUBCOMMAND_NAME:
            args = args[1:]
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        try:
            return self._build(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except SysrootKitError as e:
            logger.debug(f"Build failed: {e!r}")
            print_error(str(e))
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _build(self, args) -> int:
        """
        Resolve settings, build the sysroot and write the cargo config.

        Command line values win over the settings file; the target falls
        back to the project manifest's metadata last.
        """
        settings_file = args.config or Path.cwd() / DEFAULT_SETTINGS_FILE
        settings = load_settings(settings_file, required=args.config is not None)

        manifest_path = args.manifest_path or settings.manifest_path
        explicit_manifest = manifest_path is not None
        manifest_path = manifest_path or DEFAULT_MANIFEST

        project = None
        if manifest_path.exists():
            project = load_project_manifest(manifest_path)

        target = args.target or settings.target
        if target is None:
            if project is None:
                raise MissingTargetError()
            target = project.require_sysroot_target()

        try:
            tier = CrateTier.parse(args.tier or settings.tier or DEFAULT_TIER.value)
            features = [Feature.parse(f) for f in settings.features + args.feature]
        except ValueError as e:
            raise ConfigError(str(e)) from e

        output = args.output or settings.output or DEFAULT_OUTPUT
        rust_src = args.rust_src_dir or settings.rust_src

        builder = (
            SysrootBuilder(tier)
            .output(output)
            .target(target)
            .features(features)
            .rustc_flags(settings.rustc_flags + args.rustc_flag)
        )
        if project is not None or explicit_manifest:
            builder.manifest(manifest_path)
        if rust_src is not None:
            builder.rust_src(rust_src)

        # Validate before anything is deleted
        config = builder.snapshot()
        config.validate()

        if args.clean and remove_tree(output):
            logger.info(f"Removed old sysroot at {output}")

        logger.info("Building sysroot crates")
        sysroot = builder.build()

        if not (args.no_config or settings.no_config):
            generate_cargo_config(target, sysroot)

        if not args.quiet:
            safe_print(
                format_success_message(
                    "Sysroot built",
                    {
                        "Crate": tier.value,
                        "Target": target,
                        "Sysroot": sysroot,
                    },
                )
            )
        return 0


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
