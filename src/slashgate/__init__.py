from .commands import Command, Group, Permission, Subcommand
from .components import ComponentDefinition
from .errors import CommandConfigError, ComponentError, SlashgateError
from .interactions import Reply
from .options import Choice, OptionType, Parameter, Range
from .router import Dispatcher

__version__ = "0.3.0"

__all__ = [
    "Choice",
    "Command",
    "CommandConfigError",
    "ComponentDefinition",
    "ComponentError",
    "Dispatcher",
    "Group",
    "OptionType",
    "Parameter",
    "Permission",
    "Range",
    "Reply",
    "SlashgateError",
    "Subcommand",
    "__version__",
]
