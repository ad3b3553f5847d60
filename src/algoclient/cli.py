"""
Command-line interface for algoclient.

Calls algorithms, manages data directories and files, and serves a registered
handler over line-delimited JSON (the algorithm side of the protocol).

Credentials come from ``--config`` (JSON or YAML ``ClientConfig``) or, without
one, from ALGORITHMIA_API_KEY / ALGORITHMIA_API.
"""

import argparse
import json
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from algoclient.algo.registry import HandlerRegistry, HandlerRegistryError
from algoclient.algo.runner import DEFAULT_OUTPUT_PATH, HandlerRunner
from algoclient.bootstrap import load_handler_modules
from algoclient.client import Algorithmia
from algoclient.core.contracts import ResponseEnvelope, Text
from algoclient.core.exceptions import AlgoClientException
from algoclient.core.logger import configure_root_logger, get_logger, push_request_id, reset_request_id
from algoclient.data.acl import ReadAcl
from algoclient.data.dir import DataDirItem
from algoclient.models.client_config import ClientConfig
from algoclient.providers.env_secrets_provider import EnvSecretsProvider

logger = get_logger(__name__)


def load_config(config_path: Optional[str] = None) -> ClientConfig:
    """
    Load a ClientConfig from a JSON/YAML file, or from the environment.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the file format is not supported
    """
    if not config_path:
        return ClientConfig.from_env()

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, "r") as f:
        if config_file.suffix == ".json":
            data: Dict[str, Any] = json.load(f)
        elif config_file.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f) or {}
        else:
            raise ValueError(
                f"Unsupported config format: {config_file.suffix}. "
                "Use .json or .yaml"
            )
    logger.info(f"Loaded config from {config_path}")
    return ClientConfig.model_validate(data)


def _build_client(config_path: Optional[str]) -> Algorithmia:
    return Algorithmia.from_config(load_config(config_path), secrets_provider=EnvSecretsProvider())


def _print_response(response: ResponseEnvelope, show_stdout: bool) -> None:
    if show_stdout and response.stdout:
        sys.stdout.write(response.stdout)
        if not response.stdout.endswith("\n"):
            sys.stdout.write("\n")
    for alert in response.alerts or []:
        logger.warning(f"Alert: {alert}")
    print(str(response))
    logger.info(f"Completed in {response.duration}s")


def _cmd_run(client: Algorithmia, args: argparse.Namespace) -> int:
    algo = client.algo(args.algo)
    if args.timeout is not None:
        algo.timeout(args.timeout)
    if args.stdout:
        algo.enable_stdout()

    if args.text is not None:
        response = algo.pipe(Text(args.text))
    elif args.json is not None:
        response = algo.pipe_json(args.json)
    else:
        response = algo.pipe(Path(args.data_file).read_bytes())

    _print_response(response, args.stdout)
    return 0


def _cmd_ls(client: Algorithmia, args: argparse.Namespace) -> int:
    for entry in client.dir(args.dir).list():
        if isinstance(entry, DataDirItem):
            print(f"{entry.dir.to_data_uri()}/")
        else:
            print(f"{entry.size:>12}  {entry.last_modified.isoformat()}  {entry.file.to_data_uri()}")
    return 0


def _cmd_mkdir(client: Algorithmia, args: argparse.Namespace) -> int:
    client.dir(args.dir).create(ReadAcl(args.acl))
    return 0


def _cmd_rmdir(client: Algorithmia, args: argparse.Namespace) -> int:
    deleted = client.dir(args.dir).delete(force=args.force)
    print(f"Deleted {deleted.deleted} file(s)")
    return 0


def _cmd_cat(client: Algorithmia, args: argparse.Namespace) -> int:
    with client.file(args.file).get() as data:
        for chunk in data.iter_bytes():
            sys.stdout.buffer.write(chunk)
    sys.stdout.buffer.flush()
    return 0


def _cmd_put(client: Algorithmia, args: argparse.Namespace) -> int:
    client.dir(args.dir).put_file(args.local)
    return 0


def _cmd_rm(client: Algorithmia, args: argparse.Namespace) -> int:
    client.file(args.file).delete()
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    load_handler_modules([args.module])
    handler_class = HandlerRegistry.get(args.handler)
    runner = HandlerRunner(handler_class(), output_path=args.output)
    runner.serve(sys.stdin)
    return 0


_CLIENT_COMMANDS = {
    "run": _cmd_run,
    "ls": _cmd_ls,
    "mkdir": _cmd_mkdir,
    "rmdir": _cmd_rmdir,
    "cat": _cmd_cat,
    "put": _cmd_put,
    "rm": _cmd_rm,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="algo",
        description="Call hosted algorithms and manage hosted data",
    )
    parser.add_argument(
        "--config",
        help="Path to client configuration file (JSON or YAML)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Command to execute",
    )

    # 'run' subcommand
    run_parser = subparsers.add_parser("run", help="Call an algorithm")
    run_parser.add_argument("algo", help="Algorithm, e.g. user/algo or user/algo/1.0.0")
    input_group = run_parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("--text", "-d", help="Send text input")
    input_group.add_argument("--json", "-j", help="Send JSON input")
    input_group.add_argument("--data-file", "-D", help="Send the contents of a file as binary input")
    run_parser.add_argument("--timeout", type=int, help="Algorithm timeout in seconds")
    run_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the algorithm's stdout (owner only)",
    )

    ls_parser = subparsers.add_parser("ls", help="List a data directory")
    ls_parser.add_argument("dir", nargs="?", default="data://", help="Data directory URI")

    mkdir_parser = subparsers.add_parser("mkdir", help="Create a data directory")
    mkdir_parser.add_argument("dir", help="Data directory URI")
    mkdir_parser.add_argument(
        "--acl",
        choices=[acl.value for acl in ReadAcl],
        default=ReadAcl.MY_ALGORITHMS.value,
        help="Read access for the new directory",
    )

    rmdir_parser = subparsers.add_parser("rmdir", help="Delete a data directory")
    rmdir_parser.add_argument("dir", help="Data directory URI")
    rmdir_parser.add_argument("--force", "-f", action="store_true", help="Also delete its contents")

    cat_parser = subparsers.add_parser("cat", help="Print a data file")
    cat_parser.add_argument("file", help="Data file URI")

    put_parser = subparsers.add_parser("put", help="Upload a local file into a data directory")
    put_parser.add_argument("local", help="Local file path")
    put_parser.add_argument("dir", help="Data directory URI")

    rm_parser = subparsers.add_parser("rm", help="Delete a data file")
    rm_parser.add_argument("file", help="Data file URI")

    # 'serve' subcommand
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve a registered handler: requests on stdin, responses to the output pipe",
    )
    serve_parser.add_argument("module", help="Module registering the handler")
    serve_parser.add_argument("handler", help="Registered handler name")
    serve_parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT_PATH,
        help=f"Response pipe (default: {DEFAULT_OUTPUT_PATH})",
    )

    return parser


def cli(argv: Optional[List[str]] = None) -> int:
    """
    Command-line interface for algoclient; returns the exit code.

    Usage:
        algo run anowell/Pinky --text Hello
        algo ls data://.my
        algo serve my_handlers echo
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_root_logger("DEBUG" if args.verbose else "INFO")
    token = push_request_id(uuid.uuid4().hex[:8])
    try:
        if args.command == "serve":
            return _cmd_serve(args)
        client = _build_client(args.config)
        with client:
            return _CLIENT_COMMANDS[args.command](client, args)
    except (AlgoClientException, HandlerRegistryError, OSError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    finally:
        reset_request_id(token)


def main() -> None:
    sys.exit(cli())


if __name__ == "__main__":
    main()
