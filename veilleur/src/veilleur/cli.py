"""
Veilleur CLI - Command-line interface for the CI poller.

Polls every *.repo directory of the given directory once, tests the
branches that changed and reports failures.

All output via SystemReporter.
"""

import argparse
import sys
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional

from shared.reporter.emojis import SystemEmoji
from shared.reporter.system_reporter import SystemReporter

from veilleur import __version__
from veilleur.core.orchestrator import run_for_dir
from veilleur.domain.exceptions import CommandFailureError

VERSION_STRING = f"{__version__}, 2026-10-18"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="veilleur",
        usage="%(prog)s [-hVvna] [-m mail1,mail2] [-f from] [dir]",
        description="Continuous-integration poller for local git repositories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  veilleur ~/ci                     # Poll every *.repo in ~/ci
  veilleur -v -a ~/ci               # Retest all branches, verbose
  veilleur -n ~/ci                  # Dry run, mark branches as tested
  veilleur -m 'ci@example.com,%a'   # Mail ci@ and the commit author
  veilleur -m '' ~/ci               # Never send mail
        """,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=VERSION_STRING, help="Show version"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Output more information"
    )
    parser.add_argument(
        "-n", "--dry-run", action="store_true", help="Don't actually run tests"
    )
    parser.add_argument(
        "-a",
        "--always",
        action="store_true",
        help="Always run tests, even if the branch hasn't changed",
    )
    parser.add_argument(
        "-m",
        dest="mailto",
        metavar="mail1,mail2",
        default=None,
        help="Send email to these addresses; leave blank to disable sending "
        "emails. %%a and %%c can be used as author & committer, respectively",
    )
    parser.add_argument(
        "-f", dest="sender", metavar="from", default=None, help="From address"
    )
    parser.add_argument(
        "--env-file", type=Path, default=None, help="Load VEILLEUR_* defaults from file"
    )
    parser.add_argument(
        "--log-dir", default=None, help="Also write the log to <log-dir>/veilleur.log"
    )
    parser.add_argument(
        "dir",
        nargs="?",
        default=None,
        help="Directory to scan for *.repo (default: this script's directory)",
    )
    return parser


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate parsed flags into option overrides.

    Only flags that were given override lower configuration layers.
    """
    overrides: Dict[str, Any] = {}
    if args.verbose:
        overrides["verbose"] = True
    if args.dry_run:
        overrides["dryrun"] = True
    if args.always:
        overrides["runalways"] = True
    if args.mailto is not None:
        overrides["mailto"] = args.mailto
    if args.sender is not None:
        overrides["from"] = args.sender
    return overrides


def default_directory() -> Path:
    """Directory of the running script."""
    return Path(sys.argv[0]).resolve().parent


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    reporter = SystemReporter(
        name="veilleur",
        log_dir=args.log_dir,
        level=10 if args.verbose else 20,
        verbose=2 if args.verbose else 1,
    )

    directory = Path(args.dir) if args.dir else default_directory()

    try:
        run_for_dir(
            directory,
            overrides=build_overrides(args),
            reporter=reporter,
            env_file=args.env_file,
        )
        return 0

    except CommandFailureError:
        # Already reported by CommandRunner
        return 1

    except KeyboardInterrupt:
        reporter.warning(f"\n{SystemEmoji.SHUTDOWN} Interrupted by user", context="CLI")
        return 2

    except Exception as e:
        reporter.error(f"{SystemEmoji.ERROR} Fatal error: {e}", context="CLI")
        if args.verbose:
            reporter.error(traceback.format_exc(), context="CLI")
        return 2


if __name__ == "__main__":
    sys.exit(main())
