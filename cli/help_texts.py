"""
Centralized Help Text Constants

This module provides all CLI help text constants for commands and options,
ensuring consistency across subcommands.
"""

# Exit codes for different error types
class ExitCodes:
    SUCCESS = 0
    GENERAL_ERROR = 1
    MISSING_REQUIRED_OPTION = 2
    INVALID_CONFIGURATION = 3
    LOADER_FAILED = 4
    PACKAGE_NOT_FOUND = 5
    FILE_NOT_FOUND = 6
    PERMISSION_ERROR = 7

# Command help texts
BUILD_HELP = "Apply configured rules to the project and its dependencies, writing results to the build directory."
RULES_HELP = "Show the loader chain that configured rules resolve for a file."

# Option help texts
PROJECT_DIR_HELP = "Project directory containing package.json (default: current directory)."

CONFIG_HELP = (
    "Path to an extra configuration file (.yaml or .json), relative to the project directory. "
    "Layered on top of ./.npmbundlerrc when both exist."
)

OUTPUT_DIR_HELP = (
    "Build directory. Overrides configuration file settings and BUNDLER_OUTPUT_DIR. "
    "If not specified, uses the configured output directory or './build'."
)

MAX_PARALLEL_FILES_HELP = (
    "Maximum number of files processed at the same time within a package (default: 128)."
)

NO_DEPENDENCIES_HELP = "Only process the root package; dependencies are treated as clean."

DUMP_REPORT_HELP = "Write a JSON report of loader diagnostics to the build directory."

LOG_LEVEL_HELP = "Logging level for detailed output. Use DEBUG for troubleshooting."

LOG_FILE_HELP = "Also write log output to this file (rotated at 10MB)."
