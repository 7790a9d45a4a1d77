#!/usr/bin/env python
"""
Debug script to print all loaded settings and their sources.
Run this script to see the settings the supervisor will use.
"""

import os
from typing import Any, Tuple

from ollama_supervisor.settings import settings


def get_setting_source(setting_name: str, env_file: str = ".env") -> Tuple[str, Any]:
    """Determine the source of a setting (env var, .env file or default)."""
    env_var_name = setting_name.upper()
    for name, value in os.environ.items():
        if name.upper() == env_var_name:
            return "environment", value

    if os.path.exists(env_file):
        with open(env_file, "r") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    name, value = line.split("=", 1)
                    if name.strip().upper() == env_var_name:
                        return ".env file", value.strip()

    return "default", getattr(settings, setting_name)


def format_setting(name: str, value: Any, source: str) -> str:
    return f"{name:<20} = {str(value):<40} (from {source})"


def main() -> None:
    """Display all settings and their sources."""
    print("\n==== Ollama Supervisor Settings ====\n")

    categories = {
        "Server Settings": ["ollama_url", "ollama_bind_host", "install_script_url"],
        "Model Settings": ["model", "match_policy"],
        "Timing": [
            "poll_interval",
            "poll_attempts",
            "pull_timeout",
            "probe_timeout",
            "supervise_interval",
        ],
        "Output": ["status_file", "log_level"],
    }

    for category, names in categories.items():
        print(f"\n## {category}")
        for name in names:
            source, _ = get_setting_source(name)
            print(format_setting(name, getattr(settings, name), source))

    print("\n==== End of Settings ====\n")


if __name__ == "__main__":
    main()
