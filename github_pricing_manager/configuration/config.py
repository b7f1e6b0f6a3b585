"""Module-level reference to the resolved application configuration.

After reconciliation, `config` holds the resolved configuration instance.
Other modules can import and use this reference.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from github_pricing_manager.configuration.models import GlobalLabelUpdateConfig

    ConfigType = GlobalLabelUpdateConfig
else:
    ConfigType = object


# Ignore type checking below because for the overwhelming majority of the time
# except at the very beginning of the program, the config will not be None.
config: ConfigType = None  # type: ignore


async def set_configuration(desired_config: ConfigType) -> None:
    """Set the configuration for the application."""
    global config
    config = desired_config
