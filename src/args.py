"""Argument parsing functionality for larscripts."""

import argparse
import sys

from environment import SUPPORTED_SHELLS


def _common_options():
    """Options accepted by every subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    common.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    common.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)
    return common


_VALUE_OPTIONS = ("--loglevel", "--logfile", "-c", "--config")


def _end_of_options(argv):
    """Treat a lone '-' after update-area as the end of the options, like '--'."""
    if "update-area" not in argv:
        return argv
    index = argv.index("update-area") + 1
    while index < len(argv):
        arg = argv[index]
        if arg == "-":
            return argv[:index] + ["--"] + argv[index + 1:]
        if arg == "--" or not arg.startswith("-"):
            break
        index += 2 if arg in _VALUE_OPTIONS else 1
    return argv


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog="larscripts",
        description="Helpers to set up and maintain LArSoft working areas",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", metavar="COMMAND")
    subparsers.required = True

    init = subparsers.add_parser(
        "init", parents=[common],
        help="Print shell code registering the scripts (eval it in your login shell)",
    )
    init.add_argument("--shell",
                      dest="SHELL",
                      help="Shell to emit code for (default: bash)",
                      choices=SUPPORTED_SHELLS,
                      default="bash")
    init.add_argument("--script-dir",
                      dest="SCRIPT_DIR",
                      help="Directory holding the helper scripts",
                      action="store",
                      type=str)

    find = subparsers.add_parser(
        "find", parents=[common],
        help="Look for files in the directories of a path-list variable",
    )
    where = find.add_mutually_exclusive_group()
    where.add_argument("--fcl",
                       dest="PATH_VARIABLE",
                       help="Search FHICL_FILE_PATH (default)",
                       action="store_const",
                       const="FHICL_FILE_PATH")
    where.add_argument("--path",
                       dest="PATH_VARIABLE",
                       help="Name of the path-list variable to search",
                       action="store",
                       type=str)
    find.add_argument("NAMES",
                      help="File names (wildcards allowed)",
                      nargs="+")

    update = subparsers.add_parser(
        "update-area", parents=[common],
        help="Update the working area to allow for a new version",
        description=(
            "Updates the working area to allow for a new version. "
            "The version is detected from the checked out packages unless specified."
        ),
    )
    update.add_argument("--force",
                        dest="FORCE",
                        help="Force the recreation of the local products area; the data there will be lost!!",
                        action="store_true")
    update.add_argument("--ignoreinconsistency",
                        dest="IGNORE_INCONSISTENCY",
                        help=(
                            "If different local products have different versions, do not bail out "
                            "(it will use the last of the versions of the larXxxx packages, if any)"
                        ),
                        action="store_true")
    update.add_argument("-V", "--version",
                        dest="SHOW_VERSION",
                        help="Print the script version",
                        action="store_true")
    update.add_argument("--emit-source",
                        dest="EMIT_SOURCE",
                        help="On success, print the command sourcing the local products setup",
                        action="store_true")
    update.add_argument("VERSION", nargs="?", default=None, help="Target version")
    update.add_argument("QUALIFIERS", nargs="?", default=None, help="Target qualifiers (default: $MRB_QUALS)")

    setup = subparsers.add_parser(
        "setup", parents=[common],
        help="Run one environment setup step and print the shell code applying it",
    )
    setup.add_argument("--shell",
                       dest="SHELL",
                       help="Shell to emit code for (default: bash)",
                       choices=SUPPORTED_SHELLS,
                       default="bash")
    setup.add_argument("MODE",
                       help="base, printlocalproductsscript, localproducts, "
                            "localproductssetup, larsoft, build or artenv")
    for name in ("VERSION", "QUALIFIERS", "EXPERIMENT", "PACKAGE", "PACKAGE_VERSION"):
        setup.add_argument(name, nargs="?", default="")

    return parser.parse_args(_end_of_options(list(sys.argv[1:] if argv is None else argv)))
