"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

_TRUTHY = {"1", "true", "yes", "on"}


def _split(value: str, sep: str) -> List[str]:
    return [part.strip() for part in value.split(sep) if part.strip()]


@dataclass(frozen=True)
class Settings:
    scope: List[str] = field(default_factory=lambda: ["."])
    include_extensions: List[str] = field(default_factory=lambda: ["py"])
    host: str = "127.0.0.1"
    port: int = 8080
    verbose: bool = False
    engine: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from PYTHIA_* and SERVER_* environment variables."""
        scope = os.getenv("PYTHIA_SCOPE")
        extensions = os.getenv("PYTHIA_EXTENSIONS")
        return cls(
            scope=_split(scope, os.pathsep) if scope else ["."],
            include_extensions=_split(extensions, ",") if extensions else ["py"],
            host=os.getenv("SERVER_HOST", "127.0.0.1"),
            port=int(os.getenv("SERVER_PORT", "8080")),
            verbose=os.getenv("PYTHIA_VERBOSE", "").strip().lower() in _TRUTHY,
            engine=os.getenv("PYTHIA_ENGINE") or None,
        )
