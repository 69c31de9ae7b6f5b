from __future__ import annotations

import logging
import os
from enum import Enum
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import InvalidDungeonConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "DELVE_"


class GenerationStrategy(str, Enum):
    """Closed set of layout strategies; all share the same carving and wall building blocks."""

    ROOM_FIRST = "room_first"
    CORRIDOR_FIRST = "corridor_first"


class DungeonConfig(BaseModel):
    """Everything one generation run needs.

    ``min_room_width`` / ``min_room_height`` bound the carved floor of a room;
    the room rectangle itself is larger by ``room_margin`` on each side.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    width: int = Field(60, gt=0, description="Dungeon area width in cells")
    height: int = Field(40, gt=0, description="Dungeon area height in cells")
    origin_x: int = Field(0, description="Area origin column")
    origin_y: int = Field(0, description="Area origin row")
    min_room_width: int = Field(4, gt=0, description="Minimum carved floor width of a room")
    min_room_height: int = Field(4, gt=0, description="Minimum carved floor height of a room")
    room_margin: int = Field(1, ge=1, description="Cells between a room's floor and its partition edge")
    corridor_width: int = Field(1, ge=1, description="Corridor brush size")

    strategy: GenerationStrategy = Field(GenerationStrategy.ROOM_FIRST)
    corridor_length: int = Field(14, ge=0, description="Corridor-first: steps per corridor leg")
    corridor_count: int = Field(5, ge=0, description="Corridor-first: number of corridor legs")
    room_ratio: float = Field(0.8, ge=0.0, le=1.0, description="Corridor-first: share of leg ends given a room")

    coins_per_room: int = Field(2, ge=0)
    enemies_per_room: int = Field(1, ge=0)
    potions_per_room: int = Field(1, ge=0)
    props_per_room: int = Field(2, ge=0)
    min_prop_spacing: float = Field(1.5, ge=0.0, description="Minimum distance between any two placed entities")
    placement_retries: int = Field(50, ge=1, description="Samples per entity before it is skipped")

    seed: Optional[Union[int, str]] = Field(None, description="Master seed; None picks a random one")

    @field_validator("seed", mode="before")
    @classmethod
    def _numeric_seed(cls, v: Any) -> Any:
        # "42" from YAML strings or the environment means the same run as 42
        if isinstance(v, str) and v.strip().isdigit():
            return int(v.strip())
        return v

    @model_validator(mode="after")
    def _rooms_fit_area(self) -> "DungeonConfig":
        need_w = self.min_room_width + 2 * self.room_margin
        need_h = self.min_room_height + 2 * self.room_margin
        if need_w > self.width or need_h > self.height:
            raise ValueError(
                f"minimum room {self.min_room_width}x{self.min_room_height} plus margin "
                f"{self.room_margin} needs {need_w}x{need_h}, dungeon is only {self.width}x{self.height}"
            )
        if isinstance(self.seed, int) and self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")
        return self

    @property
    def min_partition_width(self) -> int:
        return self.min_room_width + 2 * self.room_margin

    @property
    def min_partition_height(self) -> int:
        return self.min_room_height + 2 * self.room_margin

    # ---- Loading ----------------------------------------------------------
    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DungeonConfig":
        """Validate ``data`` and raise InvalidDungeonConfig with every problem found."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            errors = [{"loc": tuple(err["loc"]), "msg": err["msg"]} for err in e.errors()]
            raise InvalidDungeonConfig("Invalid dungeon configuration", errors) from e

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def defaults(cls) -> Dict[str, Any]:
        """Packaged default values as a plain dict."""
        try:
            with resources.files("delve").joinpath("default_config.yaml").open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default config not found; falling back to model defaults.")
            data = cls().model_dump(mode="json", exclude={"seed"})
        return data.get("dungeon", data)

    @classmethod
    def env_overrides(cls, environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """``DELVE_<FIELD>`` variables (e.g. DELVE_WIDTH=50) keyed by field name."""
        env = os.environ if environ is None else environ
        found: Dict[str, str] = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in env:
                found[name] = env[key]
        return found

    @classmethod
    def load(
        cls,
        user_path: Optional[Path] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "DungeonConfig":
        """Layer packaged defaults, an optional user YAML file, ``DELVE_*``
        environment variables and finally keyword overrides (None values skipped).
        """
        data = cls.defaults()
        if user_path is not None:
            user_path = Path(user_path)
            if not user_path.exists():
                raise FileNotFoundError(f"Config file not found: {user_path}")
            user_data = cls._load_yaml(user_path)
            data = cls._deep_merge(data, user_data.get("dungeon", user_data))
            logger.info("Loaded user dungeon config from %s", user_path)
        env = cls.env_overrides(environ)
        if env:
            data = cls._deep_merge(data, env)
            logger.info("Applied environment overrides: %s", ", ".join(sorted(env)))
        data = cls._deep_merge(data, {k: v for k, v in overrides.items() if v is not None})
        cfg = cls.from_mapping(data)
        logger.debug("Dungeon config merged: %s", cfg)
        return cfg

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, base: Optional["DungeonConfig"] = None) -> "DungeonConfig":
        """Overlay ``DELVE_*`` environment variables on ``base`` (default: ``load()``)."""
        if base is None:
            return cls.load(environ=environ)
        data: Dict[str, Any] = base.model_dump()
        data.update(cls.env_overrides(environ))
        return cls.from_mapping(data)

    def to_yaml(self, path: Path) -> None:
        payload = {"dungeon": self.model_dump(mode="json")}
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(payload, f, sort_keys=False)
        logger.info("Saved dungeon config to %s", path)
