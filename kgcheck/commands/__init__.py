"""
Commands — CLI command implementations with self-registration

Each command module:
1. Defines XxxCommand class (handler implementation)
2. Exports register_parser(subparsers) to configure its argparse
3. Exports handle(cli, args) returning the process exit code

Add a command = add its module to COMMAND_MODULES.
"""

import importlib
import logging
from typing import Dict, Callable, Any

from .base import BaseCommand


logger = logging.getLogger(__name__)

# Order determines help display order
COMMAND_MODULES = [
    'validate',
    'consistency',
    'conflicts',
    'config_cmd',
]

# Handler registry: command_name -> handle function
_handlers: Dict[str, Callable] = {}


def register_all(subparsers) -> None:
    """
    Register the parser and handler of every module in COMMAND_MODULES.

    Args:
        subparsers: argparse subparsers object from main parser
    """
    _handlers.clear()

    for module_name in COMMAND_MODULES:
        module = importlib.import_module(f'.{module_name}', __package__)

        if hasattr(module, 'register_parser'):
            module.register_parser(subparsers)

        if hasattr(module, 'handle'):
            # 'config_cmd' -> 'config'
            cmd_name = getattr(module, 'COMMAND_NAME', None) or module_name.replace('_cmd', '')
            for name in getattr(module, 'COMMAND_NAMES', [cmd_name]):
                _handlers[name] = module.handle

    logger.debug("Registered commands: %s", ", ".join(_handlers))


def dispatch(command: str, cli: Any, args: Any) -> int:
    """
    Dispatch command to its registered handler.

    Returns:
        Exit code from the handler

    Raises:
        KeyError: If command not registered
    """
    if command not in _handlers:
        raise KeyError(f"Unknown command: {command}. Available: {list(_handlers.keys())}")

    return _handlers[command](cli, args)


def get_registered_commands() -> list:
    """Get list of registered command names."""
    return list(_handlers.keys())


__all__ = ['BaseCommand', 'register_all', 'dispatch', 'get_registered_commands']
