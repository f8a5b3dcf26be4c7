"""
ConfigCommand — Show or change configuration

    kgcheck config
    kgcheck config --set run.workers 4
    kgcheck config --set display.symbols ascii --user
"""

from ..presentation.symbols import safe_print
from ..presentation.template import OutputTemplate
from .base import BaseCommand


class ConfigCommand(BaseCommand):

    def show_config(self) -> int:
        template = OutputTemplate(symbols=self.symbols)
        template.header("KGCHECK CONFIG", "Current Configuration")
        template.section("SETTINGS", self.config_manager.display())
        safe_print(template.render())
        return 0

    def set_config(self, key: str, value: str, scope: str = "project") -> int:
        symbols = self.symbols
        error = self.config_manager.set(key, value, scope)

        template = OutputTemplate(symbols=symbols)
        if error:
            template.header("KGCHECK CONFIG", "Error")
            template.section("ERROR", error)
            safe_print(template.render())
            return 1

        template.header("KGCHECK CONFIG", "Configuration Updated")
        template.section("SETTING", f"Set {key} = {self.config_manager.get(key)}")
        if scope == "project":
            template.section("SAVED TO", str(self.config_manager.project_config_path))
        else:
            template.section("SAVED TO", str(self.config_manager.user_config_path))
        template.footer(f"{symbols.check_pass} Configuration saved")
        safe_print(template.render())
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'config'


def register_parser(subparsers):
    p = subparsers.add_parser('config', help='View or set configuration')
    p.add_argument('--set', nargs=2, metavar=('KEY', 'VALUE'),
                   help='Set config value (e.g., run.workers 4)')
    p.add_argument('--user', action='store_true',
                   help='Apply to user config instead of project')
    return p


def handle(cli, args):
    command = ConfigCommand(cli)
    if args.set:
        key, value = args.set
        return command.set_config(key, value, "user" if args.user else "project")
    return command.show_config()
