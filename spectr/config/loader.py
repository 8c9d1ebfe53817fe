import logging
from pathlib import Path

import yaml
from pydantic import BaseModel

from spectr.config.schema import ProjectConfig
from spectr.constants import CONFIG_FILENAME

logger = logging.getLogger(__name__)


def _warn_unknown_keys(model: BaseModel, path: str, config_path: Path) -> None:
    """Recursively warn about unknown keys in a model and its nested models."""
    if model.model_extra:
        logger.warning("Unknown keys in %s at %s: %s", path, config_path, list(model.model_extra.keys()))

    for field_name, field_value in model.__dict__.items():
        if isinstance(field_value, BaseModel):
            _warn_unknown_keys(field_value, f"{path}.{field_name}", config_path)


def load_project_config(path: Path) -> ProjectConfig:
    """Load and validate ``spectr.yml``.

    A missing or unreadable file yields defaults. Schema violations raise
    pydantic's ``ValidationError``.
    """
    if not path.exists():
        return ProjectConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to read config file %s: %s", path, e)
        return ProjectConfig()

    if not isinstance(raw, dict):
        logger.warning("Ignoring config file %s: expected a mapping, got %s", path, type(raw).__name__)
        return ProjectConfig()

    model = ProjectConfig.model_validate(raw)
    _warn_unknown_keys(model, "root", path)
    return model


def load_config_for_project(project_root: Path) -> ProjectConfig:
    return load_project_config(project_root / CONFIG_FILENAME)
