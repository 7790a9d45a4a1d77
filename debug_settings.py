#!/usr/bin/env python
"""
Debug script to print all loaded settings and their sources.
Run this script to see the settings the supervisor will use.
"""

from ollama_supervisor.debug_settings import main

if __name__ == "__main__":
    main()
