"""Shell configuration loading."""

from stackshell.lib.config.settings import ShellConfig, config_path, load_config

__all__ = ["ShellConfig", "config_path", "load_config"]
