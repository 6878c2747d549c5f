"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from zipshelf.catalog.locator import DEFAULT_CHUNK_SIZE


@dataclass(slots=True)
class AppConfig:
    data_dir: Path = Path("data")
    host: str = "0.0.0.0"
    port: int = 8888
    # Seconds; a little under a day.
    cache_max_age: int = 84600
    timeout_keep_alive: int = 15
    chunk_size: int = DEFAULT_CHUNK_SIZE
    strict: bool = False

    @property
    def cache_control(self) -> str:
        return f"max-age={self.cache_max_age}, public"

    def resolve_data_dir(self, base_dir: Path | None = None) -> Path:
        if Path(self.data_dir).is_absolute() or base_dir is None:
            return Path(self.data_dir)
        return base_dir / self.data_dir
