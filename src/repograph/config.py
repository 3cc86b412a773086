"""Configuration management for RepoGraph."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from repograph.exceptions import ConfigError
from repograph.scoring.rules import DEFAULT_NAME_RULES, DEFAULT_PATH_RULES, PatternRule

REPOGRAPH_DIR = ".repograph"
CONFIG_FILE = "config.json"


class MetricsConfig(BaseModel):
    """Connectivity metric configuration."""

    damping: float = Field(default=0.85, gt=0.0, lt=1.0)
    max_iterations: int = Field(default=20, ge=1)
    epsilon: float = Field(default=1e-6, gt=0.0)
    # Above this many nodes betweenness is estimated from sampled sources
    betweenness_exact_limit: int = 500
    betweenness_samples: int = Field(default=100, ge=1)
    betweenness_seed: int = 42


class CommunityConfig(BaseModel):
    """Community partitioning configuration."""

    same_directory_bonus: float = Field(default=0.5, ge=0.0)
    naming_pattern_bonus: float = Field(default=0.3, ge=0.0)
    bidirectional_bonus: float = Field(default=0.5, ge=0.0)
    max_levels: int = Field(default=10, ge=1)
    min_gain: float = 1e-9


class ScoringConfig(BaseModel):
    """Significance scoring configuration."""

    name_rules: list[PatternRule] = Field(
        default_factory=lambda: [r.model_copy() for r in DEFAULT_NAME_RULES]
    )
    path_rules: list[PatternRule] = Field(
        default_factory=lambda: [r.model_copy() for r in DEFAULT_PATH_RULES]
    )
    name_cap: float = Field(default=30, gt=0)
    path_cap: float = Field(default=25, gt=0)
    structure_cap: float = Field(default=25, gt=0)
    connectivity_cap: float = Field(default=20, gt=0)
    total_cap: float = Field(default=100, gt=0)
    high_value_limit: int = Field(default=20, ge=0)

    @model_validator(mode="after")
    def _rules_within_caps(self) -> ScoringConfig:
        for rules, cap, kind in (
            (self.name_rules, self.name_cap, "name"),
            (self.path_rules, self.path_cap, "path"),
        ):
            for rule in rules:
                if not 0 <= rule.score <= cap:
                    raise ValueError(
                        f"{kind} rule '{rule.category}' scores {rule.score:g}, "
                        f"outside 0..{kind}_cap ({cap:g})"
                    )
        return self


class BudgetConfig(BaseModel):
    """Context budget configuration."""

    token_budget: int = 8000
    allow_truncation: bool = True


class ProjectConfig(BaseModel):
    """Full project configuration."""

    name: str = ""
    root_path: str = "."
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    community: CommunityConfig = Field(default_factory=CommunityConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    budget: BudgetConfig = Field(default_factory=BudgetConfig)


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from `start` looking for a .repograph directory."""
    current = (start or Path.cwd()).resolve()
    while current != current.parent:
        if (current / REPOGRAPH_DIR).is_dir():
            return current
        current = current.parent
    if (current / REPOGRAPH_DIR).is_dir():
        return current
    return None


def get_repograph_dir(root: Path) -> Path:
    """Get the .repograph directory for a project root."""
    return root / REPOGRAPH_DIR


def load_config(root: Path) -> ProjectConfig:
    """Load configuration from .repograph/config.json."""
    config_path = get_repograph_dir(root) / CONFIG_FILE
    if config_path.exists():
        try:
            data = json.loads(config_path.read_text())
            return ProjectConfig(**data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e
    return ProjectConfig(name=root.name, root_path=str(root))


def save_config(root: Path, config: ProjectConfig) -> None:
    """Save configuration to .repograph/config.json."""
    rg_dir = get_repograph_dir(root)
    rg_dir.mkdir(parents=True, exist_ok=True)
    config_path = rg_dir / CONFIG_FILE
    config_path.write_text(json.dumps(config.model_dump(), indent=2))


def set_config_value(config: ProjectConfig, key: str, value: Any) -> ProjectConfig:
    """Set a nested config value using dot notation (e.g., 'budget.token_budget')."""
    parts = key.split(".")
    data = config.model_dump()
    target = data
    for part in parts[:-1]:
        if part not in target or not isinstance(target[part], dict):
            raise KeyError(f"Invalid config key: {key}")
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Invalid config key: {key}")
    target[parts[-1]] = value
    try:
        return ProjectConfig(**data)
    except ValidationError as e:
        reason = e.errors()[0]["msg"]
        raise ConfigError(f"Invalid value for {key}: {value!r} ({reason})") from e
