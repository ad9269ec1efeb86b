#!/usr/bin/env python3
"""
YAML configuration for model specifications.

Example (spec.yaml):

    model: rand_forest
    mode: regression
    engine: sklearn
    args:
      trees: 500
      min_n: 5
    engine_args:
      max_depth: 12
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigurationError
from .models import make_spec
from .spec import ModelSpec, set_engine

logger = logging.getLogger(__name__)


@dataclass
class SpecConfig:
    """Serializable description of a model spec."""
    model: str
    mode: Optional[str] = None
    engine: Optional[str] = None
    args: Dict[str, Any] = field(default_factory=dict)
    engine_args: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SpecConfig":
        if not isinstance(data, dict):
            raise ConfigurationError(f"Spec config should be a mapping, got {type(data).__name__}")
        if not data.get("model"):
            raise ConfigurationError("Spec config is missing 'model'")
        unknown = set(data) - {"model", "mode", "engine", "args", "engine_args"}
        if unknown:
            raise ConfigurationError(f"Unknown spec config keys: {sorted(unknown)}")
        for section in ("args", "engine_args"):
            value = data.get(section)
            if value is not None and not isinstance(value, dict):
                raise ConfigurationError(f"'{section}' should be a mapping, got {type(value).__name__}")
        return cls(
            model=str(data["model"]),
            mode=data.get("mode"),
            engine=data.get("engine"),
            args=dict(data.get("args") or {}),
            engine_args=dict(data.get("engine_args") or {}),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SpecConfig":
        """Load a spec config from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        return cls.from_dict(data)

    @classmethod
    def from_spec(cls, spec: ModelSpec) -> "SpecConfig":
        """Capture a spec's literal settings; unset arguments are omitted."""
        return cls(
            model=spec.model_type,
            mode=spec.mode,
            engine=spec.engine,
            args={k: v for k, v in spec.args.items() if v is not None},
            engine_args=dict(spec.eng_args),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "mode": self.mode,
            "engine": self.engine,
            "args": dict(self.args),
            "engine_args": dict(self.engine_args),
        }

    def to_yaml(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.write_text(yaml.safe_dump(self.to_dict(), sort_keys=False), encoding="utf-8")
        return path

    def build(self) -> ModelSpec:
        """Build the ModelSpec this config describes."""
        spec = make_spec(self.model, mode=self.mode, engine=self.engine, **self.args)
        if self.engine_args:
            if spec.engine is None:
                raise ConfigurationError("'engine_args' given without an engine")
            spec = set_engine(spec, spec.engine, **self.engine_args)
        logger.debug("Built %s spec from config", self.model)
        return spec


def load_spec(path: Union[str, Path]) -> ModelSpec:
    """Load a YAML spec config and build the spec."""
    return SpecConfig.from_yaml(path).build()


__all__ = ["SpecConfig", "load_spec"]
