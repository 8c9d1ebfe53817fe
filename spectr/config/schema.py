from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spectr.constants import SPECTR_DIR


class ValidationSettings(BaseModel):
    model_config = ConfigDict(extra="allow")
    strict: bool = False
    json_output: bool = False


class ProjectConfig(BaseModel):
    """Contents of ``spectr.yml`` at the project root."""

    model_config = ConfigDict(extra="allow")
    root_dir: str = SPECTR_DIR
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    log_level: Optional[str] = None

    @field_validator("root_dir")
    @classmethod
    def validate_root_dir(cls, v: str) -> str:
        """Keep the spec root inside the project: a single relative path segment."""
        cleaned = v.strip().strip("/")
        if not cleaned or cleaned in (".", "..") or "/" in cleaned or "\\" in cleaned:
            raise ValueError(f"root_dir must be a single directory name, got: {v!r}")
        return cleaned

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level
