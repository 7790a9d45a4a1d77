#!/usr/bin/env python
"""
Script to install and start Ollama and keep the required model available.
"""

import sys

from ollama_supervisor.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
