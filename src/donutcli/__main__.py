"""
Main entry point for donut-cli

This allows running the CLI with: python -m donutcli
"""
import sys

from .cli import main

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n👋 Goodbye from donut-cli!")
        sys.exit(0)
