#!/usr/bin/env python3
"""
setup-coursier - installs Coursier, a JVM and Coursier apps on a CI runner

Usage:
    setup-coursier \
        [--version=<CS_VERSION>] \
        [--cs-args=<ARGS>] \
        [--jvm=<JVM_ID>] \
        [--apps="<APP> <APP> ..."] \
        [--cache-dir=<CACHE_DIR>] \
        [--temp-dir=<TEMP_DIR>] \
        [--verbose]

Options not given on the command line are read from the action inputs
(INPUT_VERSION, INPUT_CS-ARGS, INPUT_JVM, INPUT_APPS).
"""

import argparse
import dataclasses
import logging
import shlex
import sys
from pathlib import Path
from typing import List, Optional

from application.command_runner import CommandRunner
from application.dtos import SetupInputs
from application.setup_coursier import SetupCoursier
from domain.constants import DEFAULT_VERSION
from domain.installer import CoursierInstaller
from domain.platform_key import detect_platform
from infrastructure.actions_environment import ActionsEnvironment, runner_temp_dir
from infrastructure.file_system_tool_cache import FileSystemToolCache, default_cache_dir
from infrastructure.http_downloader import HttpDownloader
from interfaces.action_inputs import load_inputs


def merge_inputs(inputs: SetupInputs, args: argparse.Namespace) -> SetupInputs:
    """Command line values win over action inputs."""
    overrides = {
        'version': args.version,
        'cs_args': args.cs_args,
        'jvm': args.jvm,
        'apps': args.apps,
    }
    merged = dataclasses.replace(
        inputs, **{key: value for key, value in overrides.items() if value is not None}
    )
    if not merged.version:
        merged = dataclasses.replace(merged, version=DEFAULT_VERSION)
    return merged


def build_setup(
    inputs: SetupInputs,
    environment: ActionsEnvironment,
    cache_dir: Optional[Path] = None,
    temp_dir: Optional[Path] = None,
) -> SetupCoursier:
    """Wire the platform, cache, installer and runner together."""
    platform_key = detect_platform()
    tool_cache = FileSystemToolCache(cache_dir or default_cache_dir(), platform_key.arch)
    downloader = HttpDownloader(temp_dir or runner_temp_dir())
    installer = CoursierInstaller(downloader, platform_key)
    runner = CommandRunner(
        tool_cache, installer, inputs.version, extra_args=shlex.split(inputs.cs_args)
    )
    return SetupCoursier(inputs, runner, environment)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='setup-coursier - install Coursier, a JVM and Coursier apps',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Action inputs
    parser.add_argument('--version', help='Coursier version to install')
    parser.add_argument('--cs-args', help='Extra arguments passed to every cs invocation')
    parser.add_argument('--jvm', help='JVM to install (e.g. temurin:17)')
    parser.add_argument('--apps', help='Space-separated list of apps to install')

    # Runner locations
    parser.add_argument('--cache-dir', type=Path,
                        help='Tool cache directory (default: $RUNNER_TOOL_CACHE or ~/.cache/setup-coursier)')
    parser.add_argument('--temp-dir', type=Path,
                        help='Download directory (default: $RUNNER_TEMP or the system temp dir)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(message)s',
        stream=sys.stdout,
    )

    environment = ActionsEnvironment()
    inputs = merge_inputs(load_inputs(), args)

    try:
        setup = build_setup(inputs, environment, args.cache_dir, args.temp_dir)
    except Exception as e:
        environment.set_failed(str(e) or e.__class__.__name__)
        return 1

    result = setup.run()
    return 0 if result.success else 1


if __name__ == '__main__':
    sys.exit(main())
