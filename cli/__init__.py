"""
CLI Package for bundle-pipeline

This package provides a modular CLI architecture using Click groups and subcommands.
Each subcommand is implemented in its own module for better maintainability and testing.

The main entry point is the main() function which creates a Click group and registers
all available subcommands. The cli() function serves as the console script entry point
for setup.py.
"""

import os
import click
from dotenv import load_dotenv
from bundler import __version__
from bundler.utils.logging_config import configure_logging

# Load environment variables from .env files
# Priority: .env.dev (if exists) overrides .env
if os.path.exists('.env.dev'):
    load_dotenv('.env.dev')
elif os.path.exists('.env'):
    load_dotenv('.env')
from .build import build
from .rules import rules

# Configure logging when CLI package is imported
configure_logging()

@click.group()
@click.version_option(version=__version__, prog_name='bundle-pipeline')
def main():
    """bundle-pipeline CLI - Apply loader rules to npm projects before bundling.
    
    Discovers the files of a project and its installed dependencies, runs each
    file through the loaders its rules select and writes the results into the
    build directory.
    """
    pass

# Register subcommands
main.add_command(build)
main.add_command(rules)

# Entry point for setup.py console script
def cli():
    """Console script entry point.
    
    This function is called when the bundle-pipeline command is executed
    from the command line after installation via pip.
    """
    main()
