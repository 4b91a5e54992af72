import os
from typing import List, Optional, Dict, Any

from pydantic import BaseModel, Field, field_validator

VERSION = "0.1.0"
ENV_PREFIX = "WSECHO_"


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)
    ws_path: str = "/ws"
    idle_timeout: float = Field(300.0, description="Seconds without a frame before closing; 0/negative = never")
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    @field_validator("ws_path")
    @classmethod
    def _path_is_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("ws_path must start with '/'")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {v}")
        return v

    @property
    def read_timeout(self) -> Optional[float]:
        return self.idle_timeout if self.idle_timeout > 0 else None

    @classmethod
    def from_env(cls, environ=None, **overrides) -> "Settings":
        """Build settings from WSECHO_* variables; explicit overrides win."""
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None or raw.strip() == "":
                continue
            if name == "allowed_origins":
                values[name] = [o.strip() for o in raw.split(",") if o.strip()]
            else:
                values[name] = raw.strip()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
