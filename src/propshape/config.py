"""Configuration for propshape.

Settings come from an optional ``propshape.yaml``; CLI options override them:
- max_depth: how many levels of nested props types to expand
- ui_module / forward_ref_name: where the ref-forwarding helper is imported from
- extensions / exclude_dirs / include_declaration_files: directory expansion
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_NAME = "propshape.yaml"


class Settings(BaseModel):
    """propshape settings."""

    max_depth: int = Field(default=2, ge=0, description="Maximum nesting depth to resolve")
    ui_module: str = Field(default="react", description="Module the ref-forwarding helper comes from")
    forward_ref_name: str = Field(default="forwardRef", description="Name of the ref-forwarding helper")
    extensions: List[str] = Field(default_factory=lambda: [".ts", ".tsx"])
    exclude_dirs: List[str] = Field(default_factory=lambda: ["node_modules"])
    include_declaration_files: bool = False
    class_props_from_heritage: bool = Field(
        default=False,
        description="Take class component props from `extends Component<Props>`",
    )

    @field_validator("extensions", mode="before")
    def _dotted(cls, value: List[str]) -> List[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in value]

    @field_validator("ui_module", "forward_ref_name")
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load configuration from YAML if provided, otherwise use defaults."""
    path = config_path or Path.cwd() / DEFAULT_CONFIG_NAME
    if path.exists():
        data = yaml.safe_load(path.read_text()) or {}
    else:
        data = {}
    return Settings(**data)
