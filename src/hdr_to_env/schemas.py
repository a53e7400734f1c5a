"""Pydantic schemas for runtime validation of pipeline inputs."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from hdr_to_env.application.options import (
    DEFAULT_BOOTSTRAP_TIMEOUT,
    DEFAULT_ENGINE_URL,
    DEFAULT_ITEM_TIMEOUT,
    DEFAULT_RESOLUTION,
    SandboxOptions,
)
from hdr_to_env.types import FailurePolicy


class PipelineConfig(BaseModel):
    """Validated configuration for one batch run.

    ``input_dir`` is both the scan root and, unless ``output_dir`` is given,
    the write root.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    input_dir: Path
    output_dir: Path | None = None
    resolution: int = Field(default=DEFAULT_RESOLUTION, gt=0)
    engine_url: str = DEFAULT_ENGINE_URL
    engine_path: Path | None = None
    failure_policy: FailurePolicy = "abort"
    bootstrap_timeout: float | None = Field(default=DEFAULT_BOOTSTRAP_TIMEOUT, gt=0)
    item_timeout: float | None = Field(default=DEFAULT_ITEM_TIMEOUT, gt=0)
    headless: bool = True

    @field_validator("input_dir", "output_dir", "engine_path", mode="before")
    @classmethod
    def _expand_path(cls, value: Path | str | None) -> Path | None:
        if value is None or value == "":
            return None
        return Path(value).expanduser()

    @field_validator("engine_url")
    @classmethod
    def _validate_engine_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("engine_url cannot be empty.")
        if not value.startswith(("http://", "https://", "file://")):
            raise ValueError("engine_url must be an http(s):// or file:// URL.")
        return value

    @model_validator(mode="after")
    def _validate_engine_path(self) -> PipelineConfig:
        if self.engine_path is not None and not self.engine_path.is_file():
            raise ValueError(f"engine_path does not exist: {self.engine_path}")
        return self

    @property
    def target_dir(self) -> Path:
        return self.output_dir if self.output_dir is not None else self.input_dir

    def sandbox_options(self) -> SandboxOptions:
        return SandboxOptions(
            engine_url=self.engine_url,
            engine_path=self.engine_path,
            headless=self.headless,
            bootstrap_timeout=self.bootstrap_timeout,
        )
