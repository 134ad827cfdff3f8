"""Report models for resolved settings."""

from pydantic import BaseModel, ConfigDict

from .settings import UNBOUNDED, Settings


class SettingsInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    port: str | None = None
    daemon: bool = False
    hit_refresh: bool = False
    threads: int
    # None means unbounded
    lifetime: int | None = None
    max_latency: int | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SettingsInfo":
        lifetime = settings.lifetime()
        max_latency = settings.max_latency()
        return cls(
            port=settings.arguments.get("port"),
            daemon=settings.is_daemon(),
            hit_refresh=settings.hit_refresh(),
            threads=settings.threads(),
            lifetime=None if lifetime == UNBOUNDED else lifetime,
            max_latency=None if max_latency == UNBOUNDED else max_latency,
        )

    def to_plain(self) -> str:
        lines = []
        for name, value in self.model_dump().items():
            if value is None:
                value = "unbounded" if name in ("lifetime", "max_latency") else "(not set)"
            lines.append(f"{name}: {value}")
        return "\n".join(lines)
