"""Composition root for the stripemock fake payment API.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here.

Module Structure:
- Configuration loading via config module
- Schema registry, store and core service initialization
- Request dispatch and httpx transport wiring
- Interactive CLI entry point
"""

import json
import logging
import sys
from dataclasses import dataclass
from typing import Any

import httpx

from stripemock.adapters.cli.commands import CLICommandHandler
from stripemock.adapters.helper.stripe_helper import StripeHelper
from stripemock.adapters.http.dispatcher import RequestDispatcher
from stripemock.adapters.http.transport import StripeMockTransport
from stripemock.adapters.schema.loader import load_registry
from stripemock.adapters.store.memory import InMemoryRecordStore
from stripemock.config import Settings, load_settings
from stripemock.core.id_generator import IdGenerator
from stripemock.core.resource_service import ResourceService


@dataclass
class FakeStripe:
    """Everything a test needs, wired together.

    Attributes:
        settings: Settings the components were built from.
        service: The core ResourceService (ResourcePort).
        dispatcher: RequestDispatcher in front of the service.
        transport: httpx transport answering requests in-process.
        helper: StripeHelper for seeding records.
    """

    settings: Settings
    service: ResourceService
    dispatcher: RequestDispatcher
    transport: StripeMockTransport
    helper: StripeHelper

    def client(self, **kwargs: Any) -> httpx.Client:
        """Return an httpx.Client whose requests are answered by the fake."""
        return httpx.Client(
            base_url=self.settings.api_base_url, transport=self.transport, **kwargs
        )

    def async_client(self, **kwargs: Any) -> httpx.AsyncClient:
        """Return an httpx.AsyncClient whose requests are answered by the fake."""
        return httpx.AsyncClient(
            base_url=self.settings.api_base_url, transport=self.transport, **kwargs
        )

    def reset(self) -> None:
        """Clear all records and id counters between tests."""
        self.service.reset()
        self.transport.requests.clear()


def build(settings: Settings | None = None) -> FakeStripe:
    """Wire the store, core service and adapters.

    Args:
        settings: Settings to use (default: loaded from the environment).

    Returns:
        FakeStripe with every component constructed.

    Raises:
        pydantic.ValidationError: If settings or the schema file are invalid.
        ValueError: If the schema file references an unknown resource type.
    """
    settings = settings or load_settings()
    registry = load_registry(settings.schema_path or None)
    store = InMemoryRecordStore()
    service = ResourceService(
        store=store,
        registry=registry,
        id_generator=IdGenerator(prefix=settings.id_prefix),
    )
    dispatcher = RequestDispatcher(service, registry)
    return FakeStripe(
        settings=settings,
        service=service,
        dispatcher=dispatcher,
        transport=StripeMockTransport(dispatcher),
        helper=StripeHelper(service),
    )


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def execute_cli_command(
    cli_handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Execute a CLI command.

    Args:
        cli_handler: CLICommandHandler instance.
        command: Command name.
        args: Command arguments.

    Returns:
        Command result dictionary.

    Raises:
        ValueError: If the command is not recognized or misses an argument.
    """
    if command == "reset":
        return cli_handler.reset()

    if "type" not in args:
        raise ValueError("Missing required parameter: type")
    resource_type = args["type"]

    if command == "list":
        return cli_handler.list(resource_type, args.get("limit"))

    if command == "create":
        return cli_handler.create(resource_type, args.get("params", {}))

    if "id" not in args:
        raise ValueError("Missing required parameter: id")

    if command == "retrieve":
        return cli_handler.retrieve(resource_type, args["id"])
    if command == "update":
        return cli_handler.update(resource_type, args["id"], args.get("params", {}))
    if command == "delete":
        return cli_handler.delete(resource_type, args["id"])

    raise ValueError(f"Unknown command: {command}")


def _print_cli_help() -> None:
    """Print CLI help message."""
    help_text = """
Available Commands (JSON format):

  create
    Create a record.
    Required: type, params

    Example: create {"type": "product", "params": {"id": "prod_1", "name": "Gold"}}

  retrieve
    Fetch a record by id.
    Required: type, id

    Example: retrieve {"type": "plan", "id": "gold"}

  update
    Overwrite attributes of a record.
    Required: type, id, params

    Example: update {"type": "plan", "id": "gold", "params": {"amount": 789}}

  delete
    Remove a record.
    Required: type, id

  list
    List records in creation order.
    Required: type
    Optional: limit

    Example: list {"type": "plan", "limit": 10}

  reset
    Clear every record and id counter.

  help
    Show this help message.

  exit
    Exit the CLI.

Note: All commands accept arguments as a single JSON object.
Provide the JSON after the command name on the same line.
    """
    print(help_text)


def run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Run interactive CLI loop against the in-memory fake.

    Args:
        cli_handler: CLICommandHandler instance for executing commands.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting interactive CLI. Type 'help' for available commands or 'exit' to quit.")

    while True:
        try:
            command_line = input("stripemock> ").strip()
        except EOFError:
            logger.info("EOF received, exiting CLI")
            break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            continue

        if not command_line:
            continue
        if command_line.lower() == "exit":
            logger.info("Exiting CLI")
            break
        if command_line.lower() == "help":
            _print_cli_help()
            continue

        parts = command_line.split(maxsplit=1)
        command = parts[0].lower()
        args_str = parts[1] if len(parts) > 1 else ""

        try:
            args = json.loads(args_str) if args_str else {}
        except json.JSONDecodeError:
            logger.error("Invalid JSON arguments. Use 'help' for command syntax.")
            continue
        if not isinstance(args, dict):
            logger.error("Arguments must be a JSON object. Use 'help' for command syntax.")
            continue

        try:
            result = execute_cli_command(cli_handler, command, args)
        except (ValueError, KeyError) as e:
            result = {"status": "error", "message": str(e)}
        print(json.dumps(result, indent=2, default=str))


def main() -> None:
    """Application entry point.

    Loads configuration, wires the fake and starts the interactive CLI.

    Exit codes:
        0: Successful shutdown
        1: Fatal configuration error
    """
    logger = logging.getLogger(__name__)
    try:
        settings = load_settings()
        configure_logging(settings.log_level, settings.log_format)
        fake = build(settings)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

    logger.info(
        "Fake payment API ready",
        extra={"resource_types": fake.service.registry.names()},
    )
    run_cli_interactive(CLICommandHandler(fake.service))


if __name__ == "__main__":
    main()
