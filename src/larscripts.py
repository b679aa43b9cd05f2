"""larscripts - helpers to set up and maintain LArSoft working areas.

    Returns:
        int: Exit code
"""
import importlib
import logging
import os
import sys

from args import parse_args
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants

COMMANDS = {
    "init": ("cli_init", "run_init"),
    "find": ("cli_init", "run_find"),
    "update-area": ("cli_update_area", "run_update_area"),
    "setup": ("cli_setup", "run_setup"),
}


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(getattr(args, "LOG_FILE", None))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    module_name, function_name = COMMANDS[args.action]
    # import lazily so that each command only loads what it needs
    module = importlib.import_module(module_name)
    exit_code = getattr(module, function_name)(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action=args.action,
                outcome="success" if exit_code == 0 else "failure",
            )
        )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
