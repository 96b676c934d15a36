# Copyright 2026 DeployML Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the DeployML command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from deployml.config import ConfigError, DeploymlConfig, find_config, load_config
from deployml.errors import DeploymlError
from deployml.model.deployment import DeploymentModel
from deployml.parser.loader import ParseError
from deployml.plugins import available_plugins, get_plugin
from deployml.transformation.transformation import transform_model
from deployml.validation.checks import validate

# ###############
# Public Interface
# ###############


def main(argv: list[str] | None = None) -> None:
    """Run the DeployML CLI."""
    parser = argparse.ArgumentParser(
        prog="deployml",
        description="DeployML: turn deployment models into infrastructure-as-code",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # transform subcommand
    transform_parser = subparsers.add_parser(
        "transform",
        help="Generate deployment artifacts for one or more targets",
        description="Load a deployment model and run the selected target plugins on it.",
    )
    transform_parser.add_argument("model", help="Path to the deployment model (YAML)")
    transform_parser.add_argument(
        "-t",
        "--target",
        action="append",
        dest="targets",
        metavar="TARGET",
        help="Target plugin to run; may be repeated (default: from configuration, else all)",
    )
    transform_parser.add_argument(
        "-o",
        "--output",
        help=f"Output directory (default: from configuration, else '{DeploymlConfig().output_directory}')",
    )
    transform_parser.add_argument(
        "--config",
        help="Configuration file (default: .deployml.yaml next to the model, if present)",
    )
    transform_parser.add_argument("-v", "--verbose", action="store_true", help="Log progress")

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check the deployment model for topology errors",
        description="Load a deployment model and report topology warnings and errors.",
    )
    check_parser.add_argument("model", help="Path to the deployment model (YAML)")

    # plugins subcommand
    subparsers.add_parser(
        "plugins",
        help="List the available target plugins",
        description="List every registered target plugin.",
    )

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.INFO if getattr(args, "verbose", False) else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "transform":
        return _cmd_transform(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "plugins":
        return _cmd_plugins(args)
    return 0


def _load_model(path: Path) -> DeploymentModel | None:
    if not path.is_file():
        print(f"Error: model file '{path}' does not exist.", file=sys.stderr)
        return None
    try:
        return DeploymentModel.of(path)
    except (ParseError, DeploymlError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _cmd_transform(args: argparse.Namespace) -> int:
    """Handle the transform subcommand."""
    model_path = Path(args.model).resolve()
    model = _load_model(model_path)
    if model is None:
        return 1

    try:
        config = load_config(Path(args.config)) if args.config else find_config(model_path)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    target_names = args.targets or config.targets or [p.name for p in available_plugins()]
    try:
        plugins = [get_plugin(name) for name in target_names]
    except KeyError as exc:
        print(f"Error: {exc.args[0]}", file=sys.stderr)
        return 1

    output = Path(args.output) if args.output else model_path.parent / config.output_directory
    try:
        transform_model(model, plugins, model_path.parent, output, config.plugin_settings())
    except DeploymlError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Generated {', '.join(p.name for p in plugins)} artifacts in '{output}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    model = _load_model(Path(args.model).resolve())
    if model is None:
        return 1

    result = validate(model)
    for warning in result.warnings:
        print(f"Warning: {warning.message}")
    for error in result.errors:
        print(f"Error: {error.message}", file=sys.stderr)
    if result.has_errors:
        return 1

    print("No issues found.")
    return 0


def _cmd_plugins(args: argparse.Namespace) -> int:
    """Handle the plugins subcommand."""
    for plugin in available_plugins():
        print(f"{plugin.name:<12} {plugin.description}")
    return 0
