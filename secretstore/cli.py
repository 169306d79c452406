"""
Command-line interface for the secretstore tool.

This module orchestrates all other components and provides
the user-facing CLI commands:
- export
- import
- encrypt
- decrypt
- clean
- list
- help
"""

from __future__ import annotations

import sys
import argparse
from pathlib import Path
from typing import List, Optional, NoReturn

from .config import (
    StoreConfig,
    TOOL_VERSION,
    get_keydir_override,
    get_settings_path,
    get_gpg_binary,
)
from .errors import SecretStoreError, UsageError
from .keyring import GpgKeyring, KeyringClient
from .locator import resolve_key_directory
from .settings import Settings
from .store import SecretStore


# ---------------------------------------------------------------------------
# Color output helpers
# ---------------------------------------------------------------------------


class Colors:
    """ANSI color codes for terminal output."""
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


def colored(text: str, color: str) -> str:
    """Return colored text for terminal output."""
    return f"{color}{text}{Colors.RESET}"


def print_error(msg: str) -> None:
    """Print error message to stderr."""
    print(colored(f"✗ Error: {msg}", Colors.RED), file=sys.stderr)


def print_success(msg: str) -> None:
    """Print success message."""
    print(colored(f"✓ {msg}", Colors.GREEN))


def print_warning(msg: str) -> None:
    """Print warning message."""
    print(colored(f"⚠ Warning: {msg}", Colors.YELLOW))


def print_info(msg: str) -> None:
    """Print info message."""
    print(colored(f"ℹ {msg}", Colors.CYAN))


# ---------------------------------------------------------------------------
# CLI context
# ---------------------------------------------------------------------------


class CLIContext:
    """Shared context for CLI commands."""

    def __init__(
        self,
        settings_path: Optional[str],
        keydir: Optional[str],
        verbose: bool,
        quiet: bool,
        cwd: Optional[Path] = None,
        keyring: Optional[KeyringClient] = None,
    ):
        self.settings_path = settings_path
        self.keydir = keydir
        self.verbose = verbose
        self.quiet = quiet
        self.cwd = Path(cwd) if cwd else Path.cwd()

        # Lazy-loaded
        self._settings: Optional[Settings] = None
        self._keyring: Optional[KeyringClient] = keyring
        self._store: Optional[SecretStore] = None

    @property
    def settings(self) -> Settings:
        """Load settings lazily."""
        if self._settings is None:
            self._settings = Settings.load(self.settings_path)
        return self._settings

    @property
    def config(self) -> StoreConfig:
        store_settings = self.settings.store
        override = self.keydir or get_keydir_override() or store_settings.key_directory
        key_directory = resolve_key_directory(self.cwd, store_settings.marker, override)
        return StoreConfig.for_directory(key_directory, store_settings.keylist)

    @property
    def keyring(self) -> KeyringClient:
        """Create the gpg keyring lazily."""
        if self._keyring is None:
            gpg = self.settings.gpg
            self._keyring = GpgKeyring(
                binary=get_gpg_binary(gpg.binary),
                homedir=gpg.homedir,
                always_trust=gpg.always_trust,
                extra_args=gpg.extra_args,
                echo=self.log_verbose,
            )
        return self._keyring

    @property
    def store(self) -> SecretStore:
        if self._store is None:
            self._store = SecretStore(self.config, self.keyring)
            self.log_verbose(f"Key directory: {self._store.config.key_directory}")
        return self._store

    def resolve(self, path: str) -> Path:
        """Resolve a user-supplied path against the context's working directory."""
        return self.cwd / Path(path).expanduser()

    def log(self, msg: str) -> None:
        """Log message if not quiet."""
        if not self.quiet:
            print(msg)

    def log_verbose(self, msg: str) -> None:
        """Log message if verbose."""
        if self.verbose:
            print(colored(f"  → {msg}", Colors.BLUE))


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------


def cmd_export(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Export a public key into the key directory and register it.
    """
    key_file = ctx.store.export_key(args.keyid, args.keyname)

    ctx.log(f"  ✓ {args.keyid} → {key_file}")
    print_success(f"Registered {args.keyid} in {ctx.store.config.registry_path}")
    return 0


def cmd_import(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Import every exported public key into the local keyring.
    """
    store = ctx.store
    key_files = store.key_files()

    if not key_files:
        ctx.log(colored(f"No key files found in {store.config.key_directory}", Colors.YELLOW))
        return 0

    if not ctx.quiet:
        print_info(f"Importing {len(key_files)} key file(s) from {store.config.key_directory}")

    imported_count = 0
    for key_file in store.import_keys():
        ctx.log(f"  ✓ {key_file.name}")
        imported_count += 1

    ctx.log("")
    print_success(f"Successfully imported {imported_count} key file(s)")
    return 0


def cmd_encrypt(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Encrypt files to every key in the keylist.
    """
    store = ctx.store
    paths = [ctx.resolve(p) for p in args.files]

    recipients = store.check_encrypt(paths)
    ctx.log_verbose(f"Recipients: {', '.join(recipients)}")

    processed_count = 0
    for path in paths:
        output_path = store.encrypt_file(path, recipients)
        ctx.log(f"  ✓ {path} → {output_path}")
        processed_count += 1

    ctx.log("")
    print_success(f"Successfully encrypted {processed_count} file(s) to {len(recipients)} recipient(s)")
    return 0


def cmd_decrypt(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Decrypt files with the local keyring.
    """
    store = ctx.store
    paths = [ctx.resolve(p) for p in args.files]

    store.check_decrypt(paths)

    processed_count = 0
    for path in paths:
        output_path = store.decrypt_file(path)
        ctx.log(f"  ✓ {path} → {output_path}")
        processed_count += 1

    ctx.log("")
    print_success(f"Successfully decrypted {processed_count} file(s)")
    return 0


def cmd_clean(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Remove plaintext files that have an encrypted sibling.
    """
    root = ctx.resolve(args.directory) if args.directory else ctx.cwd

    if not root.is_dir():
        print_error(f"Not a directory: {root}")
        return 1

    if args.dry_run:
        ctx.log(colored("[DRY RUN] Preview of changes:", Colors.YELLOW))

    removed_count = 0
    for plaintext in ctx.store.clean(root, dry_run=args.dry_run):
        ctx.log(f"  {colored('✗', Colors.RED)} {plaintext}")
        removed_count += 1

    ctx.log("")
    if args.dry_run:
        ctx.log(colored("[DRY RUN] Preview complete - no files were removed", Colors.YELLOW))
        ctx.log(f"Would remove {removed_count} file(s)")
        return 0

    print_success(f"Removed {removed_count} plaintext file(s)")
    return 0


def cmd_list(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Show the keylist.
    """
    store = ctx.store
    config = store.config

    ctx.log(colored("Key Directory", Colors.BOLD))
    ctx.log(f"  Path:     {config.key_directory}")
    ctx.log(f"  Exists:   {'yes' if config.key_directory.is_dir() else 'no'}")
    ctx.log(f"  Keylist:  {config.registry_path}")
    ctx.log("")

    if not store.registry.exists():
        print_warning(f"No keylist found at {config.registry_path}")
        return 0

    entries = store.entries()
    ctx.log(colored(f"Recipients ({len(entries)})", Colors.BOLD))
    for entry in entries:
        key_file = config.key_file(entry.key_name) if entry.key_name else None
        marker = "" if key_file and key_file.exists() else colored("  (no key file)", Colors.YELLOW)
        ctx.log(f"  {entry.key_id:<20} {entry.key_name}{marker}")

    return 0


def cmd_help(ctx: Optional[CLIContext], args: Optional[argparse.Namespace]) -> int:
    """
    Show help message.
    """
    print(usage_text())
    return 0


def usage_text() -> str:
    return f"""
{colored('secretstore', Colors.BOLD)} — share encrypted files with a group of gpg keys

{colored('USAGE:', Colors.CYAN)}
  secretstore [options] <command> [args...]

{colored('DESCRIPTION:', Colors.CYAN)}
  secretstore keeps a directory of exported public keys and a keylist
  next to your files. Files are encrypted to every key in the keylist,
  so any listed member can decrypt them with their own private key.

  The key directory is the closest '.secretstore' directory in the
  current directory or any parent. If none exists, export creates one
  in the current directory.

{colored('COMMANDS:', Colors.CYAN)}
  export KEYID [KEYNAME]    Export your public key and add it to the keylist
                            (KEYNAME defaults to user@host)
  import                    Import every *.pub key into your gpg keyring
  encrypt FILENAME...       Encrypt files to all keys, writing FILENAME.gpg
  decrypt FILENAME...       Decrypt FILENAME.gpg files, writing FILENAME
  clean [DIR] [--dry-run]   Delete plaintext files that have a .gpg sibling
  list                      Show the keylist
  help                      Show this help message

{colored('GLOBAL OPTIONS:', Colors.CYAN)}
  -c, --config PATH         Settings YAML file
  -k, --keydir PATH         Use this key directory instead of searching
  -v, --verbose             Enable verbose output
  -q, --quiet               Suppress non-error output
  -h, --help                Show this help message and exit

{colored('ENVIRONMENT:', Colors.CYAN)}
  SECRETSTORE_KEYDIR        Key directory override
  SECRETSTORE_CONFIG        Settings file used when --config is not given
  SECRETSTORE_GPG           gpg executable to run

{colored('EXAMPLES:', Colors.CYAN)}
  secretstore export 0xDEADBEEF alice
  secretstore import
  secretstore encrypt secret.txt
  secretstore decrypt secret.txt.gpg
  secretstore clean --dry-run

{colored('VERSION:', Colors.CYAN)}
  {TOOL_VERSION}
"""


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = ArgumentParser(
        prog="secretstore",
        description="Share encrypted files with a group of gpg keys",
        add_help=False,
    )

    # Global options
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to settings file",
    )
    parser.add_argument(
        "-k", "--keydir",
        default=None,
        help="Key directory to use",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )
    parser.add_argument(
        "-h", "--help",
        action="store_true",
        help="Show help message",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # export command
    export_parser = subparsers.add_parser("export", help="Export a public key", add_help=False)
    export_parser.add_argument("keyid", help="Key id to export")
    export_parser.add_argument("keyname", nargs="?", default=None, help="Name for the exported key")

    # import command
    subparsers.add_parser("import", help="Import all exported keys", add_help=False)

    # encrypt command
    encrypt_parser = subparsers.add_parser("encrypt", help="Encrypt files to all keys", add_help=False)
    encrypt_parser.add_argument("files", nargs="+", help="Files to encrypt")

    # decrypt command
    decrypt_parser = subparsers.add_parser("decrypt", help="Decrypt files", add_help=False)
    decrypt_parser.add_argument("files", nargs="+", help="Files to decrypt")

    # clean command
    clean_parser = subparsers.add_parser("clean", help="Delete plaintexts with a ciphertext sibling", add_help=False)
    clean_parser.add_argument("directory", nargs="?", default=None, help="Directory to scan")
    clean_parser.add_argument("-n", "--dry-run", action="store_true", help="Show what would be removed")

    # list command
    subparsers.add_parser("list", help="Show the keylist", add_help=False)

    # help command
    subparsers.add_parser("help", help="Show help message", add_help=False)

    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(
    argv: Optional[List[str]] = None,
    cwd: Optional[Path] = None,
    keyring: Optional[KeyringClient] = None,
) -> int:
    """Main CLI entry point."""
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        print_error(str(e))
        print(usage_text(), file=sys.stderr)
        return 1

    if args.help or args.command == "help":
        return cmd_help(None, args)

    # No command is a usage error
    if not args.command:
        print(usage_text(), file=sys.stderr)
        return 1

    # Build context
    ctx = CLIContext(
        settings_path=args.config or get_settings_path(),
        keydir=args.keydir,
        verbose=args.verbose,
        quiet=args.quiet,
        cwd=cwd,
        keyring=keyring,
    )

    # Dispatch to command
    commands = {
        "export": cmd_export,
        "import": cmd_import,
        "encrypt": cmd_encrypt,
        "decrypt": cmd_decrypt,
        "clean": cmd_clean,
        "list": cmd_list,
    }

    cmd_func = commands.get(args.command)
    if not cmd_func:
        print_error(f"Unknown command: {args.command}")
        print(usage_text(), file=sys.stderr)
        return 1

    try:
        return cmd_func(ctx, args)
    except UsageError as e:
        print_error(str(e))
        print(usage_text(), file=sys.stderr)
        return 1
    except SecretStoreError as e:
        print_error(str(e))
        return 1
    except KeyboardInterrupt:
        print_error("Interrupted")
        return 130
    except OSError as e:
        print_error(str(e))
        return 1
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
