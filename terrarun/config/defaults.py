"""
Default settings for terrarun.

These are the default values used when no user configuration exists.
"""

DEFAULT_SETTINGS = {
    "version": "1.0",

    # Terraform binary
    "terraform_binary": "terraform",

    # Echo terraform stdout while it runs
    "print_output": False,

    # Log every command line at INFO instead of DEBUG
    "debug": False,

    # Seconds before a running command is terminated, None for no limit
    "timeout": None,

    # Logging
    "log_level": "INFO",
    "log_file": False,

    # Module fetching
    "modules": {
        "version": "",
    },
}
