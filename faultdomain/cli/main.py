# faultdomain/cli/main.py
import argparse
import logging
import sys

from faultdomain import __version__
from faultdomain.cli.config_cmd import show_config, validate_config_cmd
from faultdomain.cli.demo_cmd import run_demo


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="faultdomain",
        description="Asynchronous fault isolation for callback-style asyncio code",
    )
    parser.add_argument("--version", action="version", version=f"faultdomain {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")

    sub = parser.add_subparsers(dest="command")

    config_p = sub.add_parser("config", help="Inspect configuration")
    config_sub = config_p.add_subparsers(dest="config_command")

    show_p = config_sub.add_parser("show", help="Print the effective configuration")
    show_p.add_argument("--config", help="Path to a YAML config file")
    show_p.add_argument("--json", action="store_true", help="Print JSON instead of YAML")
    show_p.set_defaults(func=show_config)

    validate_p = config_sub.add_parser("validate", help="Check configuration for problems")
    validate_p.add_argument("--config", help="Path to a YAML config file")
    validate_p.set_defaults(func=validate_config_cmd)

    demo_p = sub.add_parser("demo", help="Run the three-act fault attribution demo")
    demo_p.set_defaults(func=run_demo)

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 2
    return func(args)


if __name__ == "__main__":
    sys.exit(main())
