"""
Rules Subcommand Module

This module implements the rules subcommand for the bundler CLI.
Prints the loader chain configured rules resolve for a single file, which
helps debug `test`/`include`/`exclude` expressions.
"""

import json
import logging
import sys

import click

from bundler.errors import BundlerErrorInfo, ConfigurationError
from bundler.project import Project
from .help_texts import RULES_HELP, PROJECT_DIR_HELP, CONFIG_HELP, ExitCodes
from .shared_options import project_dir_option, config_option


logger = logging.getLogger(__name__)


@click.command(help=RULES_HELP)
@click.argument("file_path")
@project_dir_option(help=PROJECT_DIR_HELP)
@config_option(help=CONFIG_HELP)
def rules(file_path, project_dir, config):
    """Show the loader chain resolved for FILE_PATH."""
    try:
        project = Project.load(project_dir, config_file=config)
    except ConfigurationError as e:
        info = BundlerErrorInfo.from_exception(e)
        click.echo(f"\n❌ {info.error_type}: {info.message}", err=True)
        if info.suggestion:
            click.echo(f"   Suggestion: {info.suggestion}", err=True)
        sys.exit(ExitCodes.INVALID_CONFIGURATION)
    
    loaders = project.rules.loaders_for_file(project.absolute(file_path.replace("\\", "/")))
    logger.debug(f"Resolved {len(loaders)} loader(s) for {file_path}")
    
    if not loaders:
        click.echo(f"No rules apply to {file_path}")
        return
    
    click.echo(f"Loaders for {file_path}:")
    for index, loader in enumerate(loaders, start=1):
        options = f" {json.dumps(dict(loader.options), sort_keys=True)}" if loader.options else ""
        click.echo(f"  {index}. {loader.use}{options}")
