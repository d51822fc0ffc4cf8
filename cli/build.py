"""
Build Subcommand Module

This module implements the build subcommand for the bundler CLI.
Applies the project's configured rules to the root package and its npm
dependencies, writing transformed files into the build directory.
"""

import asyncio
import logging
import os
import sys
import time

import click

from bundler.engine import Report, RulesOrchestrator
from bundler.errors import (
    BundlerErrorInfo,
    ConfigurationError,
    LoaderExecutionError,
    PackageResolutionError,
)
from bundler.packages import find_dependency_packages, load_root_package
from bundler.project import Project
from bundler.utils.logging_config import logging_config
from .help_texts import (
    BUILD_HELP, PROJECT_DIR_HELP, CONFIG_HELP, OUTPUT_DIR_HELP,
    MAX_PARALLEL_FILES_HELP, NO_DEPENDENCIES_HELP, DUMP_REPORT_HELP,
    LOG_LEVEL_HELP, LOG_FILE_HELP, ExitCodes,
)
from .shared_options import (
    project_dir_option, config_option, output_dir_option,
    max_parallel_files_option, log_level_option, log_file_option,
)


logger = logging.getLogger(__name__)


@click.command(help=BUILD_HELP)
@project_dir_option(help=PROJECT_DIR_HELP)
@config_option(help=CONFIG_HELP)
@output_dir_option(help=OUTPUT_DIR_HELP)
@max_parallel_files_option(help=MAX_PARALLEL_FILES_HELP)
@click.option("--no-dependencies", is_flag=True, default=False, help=NO_DEPENDENCIES_HELP)
@click.option("--dump-report", is_flag=True, default=False, help=DUMP_REPORT_HELP)
@log_level_option(help=LOG_LEVEL_HELP)
@log_file_option(help=LOG_FILE_HELP)
def build(project_dir, config, output_dir, max_parallel_files, no_dependencies,
          dump_report, log_level, log_file):
    """
    Apply configured rules to the project and its dependencies.
    
    Files matched by no rule are not copied. Output already written when a
    loader fails is left in the build directory.
    """
    cli_overrides = {
        "output": output_dir,
        "max_parallel_files": max_parallel_files,
        "log_level": log_level.lower() if log_level else None,
        "log_file": log_file,
        "dump_report": True if dump_report else None,
    }
    
    try:
        project = Project.load(project_dir, config_file=config, cli_overrides=cli_overrides)
        logging_config.configure_logging(
            level=project.config.log_level,
            log_file=project.config.log_file,
            force=True,
        )
        logging_config.log_configuration_details({
            "project_dir": project.dir,
            "sources": project.sources,
            "output": project.build_dir,
            "max_parallel_files": project.max_parallel_files,
            "rules": project.config.rules,
        })
        
        root_pkg = load_root_package(project)
        dep_pkgs = find_dependency_packages(project, clean=no_dependencies)
        logger.info(f"Bundling {root_pkg.id} with {len(dep_pkgs)} dependency package(s)")
        
        report = Report()
        orchestrator = RulesOrchestrator(project, report=report)
        
        start_time = time.time()
        result = asyncio.run(orchestrator.run(root_pkg, dep_pkgs))
        logging_config.log_operation_timing("Rules", time.time() - start_time)
        
        click.echo(
            f"✅ Applied rules to {len(result.packages_processed)} package(s): "
            f"{result.files_processed} file(s) processed, "
            f"{result.artifacts_written} extra artifact(s) written"
        )
        if result.packages_skipped:
            click.echo(f"   Skipped {len(result.packages_skipped)} clean package(s)")
        
        summary = report.summary()
        if summary["warn"] or summary["error"]:
            click.echo(f"⚠️  Loaders reported {summary['warn']} warning(s) and {summary['error']} error(s)")
        
        if project.config.dump_report:
            report_path = os.path.join(
                project.dir, *project.build_dir.split("/"), project.config.report_file
            )
            report.write(report_path)
            click.echo(f"   Report written to: {report_path}")
    
    except ConfigurationError as e:
        _exit_with_error(e, ExitCodes.INVALID_CONFIGURATION)
    except PackageResolutionError as e:
        _exit_with_error(e, ExitCodes.PACKAGE_NOT_FOUND)
    except LoaderExecutionError as e:
        _exit_with_error(e, ExitCodes.LOADER_FAILED)
    except FileNotFoundError as e:
        _exit_with_error(e, ExitCodes.FILE_NOT_FOUND)
    except PermissionError as e:
        _exit_with_error(e, ExitCodes.PERMISSION_ERROR)
    except Exception as e:
        logger.exception(f"Unexpected error during build: {e}")
        _exit_with_error(e, ExitCodes.GENERAL_ERROR)


def _exit_with_error(error: Exception, exit_code: int) -> None:
    """Print a user-facing error and exit with the given code."""
    info = BundlerErrorInfo.from_exception(error)
    logger.error(f"Build failed: {info.message}")
    
    click.echo(f"\n❌ {info.error_type}: {info.message}", err=True)
    for key, value in info.details.items():
        click.echo(f"   {key}: {value}", err=True)
    if info.suggestion:
        click.echo(f"   Suggestion: {info.suggestion}", err=True)
    sys.exit(exit_code)
