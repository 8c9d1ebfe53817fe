"""Project configuration for spectr.

Loaded from an optional ``spectr.yml`` at the project root::

    root_dir: spectr
    log_level: INFO
    validation:
      strict: true
      json_output: false
"""

from spectr.config.loader import load_config_for_project, load_project_config
from spectr.config.schema import ProjectConfig, ValidationSettings

__all__ = [
    "ProjectConfig",
    "ValidationSettings",
    "load_config_for_project",
    "load_project_config",
]
