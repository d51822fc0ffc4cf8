"""
Shared CLI Option Decorators

This module provides reusable Click decorators for common CLI options,
ensuring consistency across subcommands.
"""

import click

def project_dir_option(help=None):
    """Decorator for the project directory option."""
    def decorator(f):
        return click.option(
            '--project-dir', '-p',
            default='.',
            type=click.Path(exists=True, file_okay=False),
            help=help or 'Project directory'
        )(f)
    return decorator

def config_option(help=None):
    """Decorator for configuration file options."""
    def decorator(f):
        return click.option(
            '--config', '-c',
            default=None,
            help=help or 'Path to configuration file'
        )(f)
    return decorator

def output_dir_option(help=None):
    """Decorator for output directory options."""
    def decorator(f):
        return click.option(
            '--output-dir', '-o',
            default=None,
            help=help or 'Build directory (overrides config)'
        )(f)
    return decorator

def max_parallel_files_option(help=None):
    """Decorator for the concurrency bound option."""
    def decorator(f):
        return click.option(
            '--max-parallel-files',
            default=None,
            type=click.IntRange(min=1),
            help=help or 'Maximum number of files processed concurrently'
        )(f)
    return decorator

def log_level_option(help=None):
    """Decorator for logging level options."""
    def decorator(f):
        return click.option(
            '--log-level',
            default=None,
            type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
            help=help or 'Logging level'
        )(f)
    return decorator

def log_file_option(help=None):
    """Decorator for log file options."""
    def decorator(f):
        return click.option(
            '--log-file',
            default=None,
            type=click.Path(dir_okay=False),
            help=help or 'Log file path'
        )(f)
    return decorator
