"""ghrpc entry point.

Loads config, sets up logging and either validates the credential
(``--check``) or runs a single request through the service (``call``).
Serving over a socket is left to the daemon framework.

Usage: python -m ghrpc [--config PATH] [--check] [call METHOD [-p JSON]]
"""

import argparse
import json
import sys
from pathlib import Path

from ghrpc.config import load_config
from ghrpc.errors import GitHubServiceError
from ghrpc.logging import ServiceLogging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI with optional ``call`` subcommand."""
    parser = argparse.ArgumentParser(
        prog="ghrpc",
        description="GitHub RPC service - config check or one-off method call",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load config and resolve the GitHub token, then exit",
    )
    sub = parser.add_subparsers(dest="subcommand")
    call = sub.add_parser("call", help="Dispatch one method and print the response envelope")
    call.add_argument("method", help="Method name, e.g. repos or github.repos")
    call.add_argument("--params", "-p", default="{}", help="JSON object of parameters")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    config_path = args.config
    if not config_path.is_file() and config_path == Path("config.yaml"):
        if Path("config.example.yaml").is_file():
            config_path = Path("config.example.yaml")

    config = load_config(config_path)
    service_logging = ServiceLogging(config.logging)
    service_logging.setup()
    log = service_logging.get_logger("ghrpc.main")

    if args.check:
        from ghrpc.auth import resolve_token

        try:
            resolve_token(config.explicit_token)
        except GitHubServiceError as e:
            log.error("Credential check failed: %s", e)
            return 1
        print("Config OK:", config.service.name, config.github.graphql_url, "socket:", config.service.socket)
        return 0

    if args.subcommand != "call":
        log.error("Nothing to do: pass --check or 'call METHOD'")
        return 2

    try:
        params = json.loads(args.params)
    except json.JSONDecodeError as e:
        log.error("Invalid --params JSON: %s", e)
        return 2

    from ghrpc.service import GitHubService, handle_request

    try:
        service = GitHubService(config)
    except GitHubServiceError as e:
        log.error("Failed to create GitHubService: %s", e)
        return 1

    try:
        response = handle_request(service, {"id": "cli", "method": args.method, "params": params})
    finally:
        service.runner.shutdown()
        service.client.close()
    print(json.dumps(response, indent=2))
    return 0 if response["ok"] else 1


if __name__ == "__main__":
    sys.exit(main())
