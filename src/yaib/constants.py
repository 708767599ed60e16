from enum import Enum

# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "build": "yaib.builder.build",
    "bld": "yaib.builder.build",
    "recipe": "yaib.recipe",
    "rcp": "yaib.recipe",
    "pre": "yaib.preprocess",
    "tpl": "yaib.preprocess",
    "sbx": "yaib.sandbox",
    "sandbox": "yaib.sandbox",
    "tree": "yaib.io.tree",
    "io": "yaib.io",
    "act": "yaib.bases",
    "actions": "yaib.bases",
    "cmd": "yaib.utils.command",
    "rty": "yaib.registry",
    "fac": "yaib.factories",
    "ses": "yaib.session",
}

# Top-level modules within yaib for auto-prefixing
KNOWN_TOP_MODULES = {
    "builder",
    "io",
    "bases",
    "datacls",
    "utils",
    "sandbox",
    "exceptions",
    "recipe",
    "preprocess",
    "registry",
    "factories",
    "session",
    "cli",
}

LOG_LEVELS_ENV = "YAIB_LOG_LEVELS"

# --- Filenames and Paths ---
SANDBOX_SCRATCHDIR = "/scratch"
SCRATCH_PREFIX = ".yaib-"
ROOTDIR_NAME = "root"
MNTDIR_NAME = "mnt"

# --- Sandbox ---
IN_SANDBOX_ENV = "YAIB_IN_SANDBOX"
DISABLE_SANDBOX_ENV = "YAIB_DISABLE_SANDBOX"
SANDBOX_IMAGE_ENV = "YAIB_SANDBOX_IMAGE"
DEFAULT_SANDBOX_IMAGE = "yaib:latest"
SANDBOX_ENTRYPOINT = ["yaib"]

# --- Recipe ---
SECTOR_SIZE = 512
ACTION_CLASS_SUFFIX = "Action"


class Phase(str, Enum):
    """Lifecycle phases, in the order the driver calls them."""

    VERIFY = "Verify"
    PRE_MACHINE = "PreMachine"
    PRE_NO_MACHINE = "PreNoMachine"
    RUN = "Run"
    CLEANUP = "Cleanup"
    POST_MACHINE = "PostMachine"

    def __str__(self) -> str:
        return self.value


class ExecutionMode(str, Enum):
    """Where the real work of a pipeline ends up running."""

    HOST_DIRECT = "host-direct"
    HOST_WITH_SANDBOX = "host-with-sandbox"
    INSIDE_SANDBOX = "inside-sandbox"


# --- Images ---
SIZE_UNITS = {
    "": 1,
    "B": 1,
    "K": 1000,
    "KB": 1000,
    "KIB": 1024,
    "M": 1000 ** 2,
    "MB": 1000 ** 2,
    "MIB": 1024 ** 2,
    "G": 1000 ** 3,
    "GB": 1000 ** 3,
    "GIB": 1024 ** 3,
    "T": 1000 ** 4,
    "TB": 1000 ** 4,
    "TIB": 1024 ** 4,
}

TAR_COMPRESSION_FLAGS = {
    "gz": "z",
    "bz2": "j",
    "xz": "J",
    "none": "",
}
