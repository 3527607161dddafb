from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

CONFIG_PATH = Path(
    os.getenv(
        "DEVSERVER_TOOLBAR_CONFIG",
        Path.home() / ".config" / "devserver_toolbar" / "config.json",
    )
)

DEFAULT_CONFIG = {
    "port_start": 3000,
    "port_end": 3010,
    "engine_keyword": "node",
    "framework_keywords": ["nuxt", "nuxi", "nitro"],
    "refresh_interval": 5.0,
    "cwd_lookup_timeout": 1.0,
    "command_timeout": 5.0,
    "browser_host": "localhost",
    "open_command": "open",
}

MIN_PORT = 1
MAX_PORT = 65535
MIN_REFRESH_INTERVAL = 1.0


@dataclass
class ToolbarConfig:
    port_start: int = DEFAULT_CONFIG["port_start"]
    port_end: int = DEFAULT_CONFIG["port_end"]
    engine_keyword: str = DEFAULT_CONFIG["engine_keyword"]
    framework_keywords: List[str] = field(
        default_factory=lambda: list(DEFAULT_CONFIG["framework_keywords"])
    )
    refresh_interval: float = DEFAULT_CONFIG["refresh_interval"]
    cwd_lookup_timeout: float = DEFAULT_CONFIG["cwd_lookup_timeout"]
    command_timeout: float = DEFAULT_CONFIG["command_timeout"]
    browser_host: str = DEFAULT_CONFIG["browser_host"]
    open_command: str = DEFAULT_CONFIG["open_command"]

    @property
    def port_range(self) -> Tuple[int, int]:
        return self.port_start, self.port_end

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolbarConfig":
        port_start = _clamp_port(_coerce_int(data.get("port_start"), DEFAULT_CONFIG["port_start"]))
        port_end = _clamp_port(_coerce_int(data.get("port_end"), DEFAULT_CONFIG["port_end"]))
        if port_end < port_start:
            port_start, port_end = port_end, port_start

        engine_keyword = data.get("engine_keyword")
        if not isinstance(engine_keyword, str) or not engine_keyword.strip():
            engine_keyword = DEFAULT_CONFIG["engine_keyword"]

        raw_keywords = data.get("framework_keywords")
        keywords = []
        if isinstance(raw_keywords, list):
            keywords = [k.strip().lower() for k in raw_keywords if isinstance(k, str) and k.strip()]
        if not keywords:
            keywords = list(DEFAULT_CONFIG["framework_keywords"])

        refresh_interval = max(
            MIN_REFRESH_INTERVAL,
            _coerce_float(data.get("refresh_interval"), DEFAULT_CONFIG["refresh_interval"]),
        )
        cwd_lookup_timeout = _coerce_float(
            data.get("cwd_lookup_timeout"), DEFAULT_CONFIG["cwd_lookup_timeout"]
        )
        command_timeout = _coerce_float(
            data.get("command_timeout"), DEFAULT_CONFIG["command_timeout"]
        )

        browser_host = data.get("browser_host")
        if not isinstance(browser_host, str) or not browser_host.strip():
            browser_host = DEFAULT_CONFIG["browser_host"]
        open_command = data.get("open_command")
        if not isinstance(open_command, str) or not open_command.strip():
            open_command = DEFAULT_CONFIG["open_command"]

        return cls(
            port_start=port_start,
            port_end=port_end,
            engine_keyword=engine_keyword.strip().lower(),
            framework_keywords=keywords,
            refresh_interval=refresh_interval,
            cwd_lookup_timeout=cwd_lookup_timeout if cwd_lookup_timeout > 0 else DEFAULT_CONFIG["cwd_lookup_timeout"],
            command_timeout=command_timeout if command_timeout > 0 else DEFAULT_CONFIG["command_timeout"],
            browser_host=browser_host.strip(),
            open_command=open_command.strip(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "port_start": self.port_start,
            "port_end": self.port_end,
            "engine_keyword": self.engine_keyword,
            "framework_keywords": list(self.framework_keywords),
            "refresh_interval": self.refresh_interval,
            "cwd_lookup_timeout": self.cwd_lookup_timeout,
            "command_timeout": self.command_timeout,
            "browser_host": self.browser_host,
            "open_command": self.open_command,
        }


def ensure_config_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def load_config(path: Path | None = None) -> ToolbarConfig:
    path = path or CONFIG_PATH
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError):
            data = {}
    else:
        data = {}
    if not isinstance(data, dict):
        data = {}
    return ToolbarConfig.from_dict(data)


def save_config(config: ToolbarConfig, path: Path | None = None) -> None:
    path = path or CONFIG_PATH
    payload = config.to_dict()
    ensure_config_dir(path)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=True)


def _coerce_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _coerce_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _clamp_port(port: int) -> int:
    return max(MIN_PORT, min(MAX_PORT, port))


__all__ = ["ToolbarConfig", "load_config", "save_config", "CONFIG_PATH"]
