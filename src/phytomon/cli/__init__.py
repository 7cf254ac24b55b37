"""Command-line interface modules for phytomon consolidation runs.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from phytomon.cli.run_consolidation import run_consolidation, main

__all__ = ['run_consolidation', 'main']
