"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FAILURE = 1
    USAGE = 2


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    SCRIPT_VERSION = "1.0"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "LARSCRIPTS_LOG_LEVEL"
    ENV_CONFIG = "LARSCRIPTS_CONFIG"
    DEFAULT_CONFIG_PATH = "~/.config/larscripts/config.yml"
    OUTPUT_PREFIX = "| "

    # Qualifiers
    QUALIFIER_SEPARATOR = ":"
    BUILD_MODE_QUALIFIERS = ("prof", "opt", "debug")

    # Working area layout
    PRODUCT_DEPS_FILE = "ups/product_deps"
    VCS_MARKER = ".git"
    MANDATORY_PREFIX = "lar"
    CORE_PACKAGE = "larsoft"
    LOCAL_PRODUCTS_PREFIX = "localProducts"
    LOCAL_PRODUCTS_LINK = "localProducts"
    LOCAL_PRODUCTS_ALT = "localProd"
    LOCAL_PRODUCTS_SETUP = "setup"
    UPS_SETUPS_FILE = "setups"

    # Environment variables (UPS / MRB conventions)
    ENV_MRB_TOP = "MRB_TOP"
    ENV_MRB_SOURCE = "MRB_SOURCE"
    ENV_MRB_BUILD = "MRB_BUILD"
    ENV_MRB_PROJECT = "MRB_PROJECT"
    ENV_MRB_QUALS = "MRB_QUALS"
    ENV_MRB_DIR = "MRB_DIR"
    ENV_MRB_VERSION = "MRB_VERSION"
    ENV_UPS_DIR = "UPS_DIR"
    ENV_PRODUCTS = "PRODUCTS"
    ENV_FHICL_FILE_PATH = "FHICL_FILE_PATH"
    ENV_FW_SEARCH_PATH = "FW_SEARCH_PATH"
    ENV_SCRIPT_DIR = "LARSCRIPTDIR"

    # Build tool
    BUILD_TOOL = "mrb"
    BUILD_TOOL_OLD_STYLE_PREFIX = "v0"
    BUILD_TOOL_SETENV_SCRIPT = "bin/mrbSetEnv"

    # Helper scripts looked up in the script directory by `init`
    HELPER_LARSWITCH = "larswitch.sh"
    HELPER_FIND_IN_PATH = "FindInPath.sh"
    HELPER_GOTOREPO = "largotorepo.sh"

    EXPERIMENTS = {
        "icarus": {
            "bootstrap": "/cvmfs/icarus.opensciencegrid.org/products/icarus/setup_icarus.sh",
            "codenames": ["icaruscode"],
        },
        "sbnd": {
            "bootstrap": "/cvmfs/sbnd.opensciencegrid.org/products/sbnd/setup_sbnd.sh",
            "codenames": ["sbndcode"],
        },
        "uboone": {
            "bootstrap": "/cvmfs/uboone.opensciencegrid.org/products/setup_uboone.sh",
            "codenames": ["uboonecode"],
        },
        "microboone": {
            "bootstrap": "/cvmfs/uboone.opensciencegrid.org/products/setup_uboone.sh",
            "codenames": ["uboonecode"],
        },
        "dune": {
            "bootstrap": "/cvmfs/dune.opensciencegrid.org/products/dune/setup_dune.sh",
            "codenames": ["dunesw"],
        },
        "lariat": {
            "bootstrap": "/cvmfs/lariat.opensciencegrid.org/setup_lariat.sh",
            "codenames": [],
        },
        "argoneut": {
            "bootstrap": "/cvmfs/argoneut.opensciencegrid.org/setup_argoneut.sh",
            "codenames": [],
        },
    }
    LOCAL_PRODUCTS_DIRS = []
    OVERRIDE_PRODUCTS_DIRS = []
    ARTENV_FCL_DIRS = ["job", "fcl"]
    ARTENV_DATA_DIRS = ["gdml", "data"]
