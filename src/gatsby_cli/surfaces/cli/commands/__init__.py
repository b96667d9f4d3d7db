from .local import register_local_commands
from .new import register_new_command
from .utils import get_cli_version, handler, show_root_help  # noqa: F401

__all__ = [
    "register_local_commands",
    "register_new_command",
    "get_cli_version",
    "handler",
    "show_root_help",
]
