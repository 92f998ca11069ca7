from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any

OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _xdg_config_home() -> Path:
    env = os.environ.get("XDG_CONFIG_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config"


def default_config_path() -> Path:
    return _xdg_config_home() / "dndcalc" / "config.json"


@dataclass(frozen=True)
class CalculatorConfig:
    seed: int | None = None
    output: str = "text"
    show_tokens: bool = False


@dataclass(frozen=True)
class WebConfig:
    host: str = "127.0.0.1"
    port: int = 8787
    open_browser: bool = True


@dataclass(frozen=True)
class AppConfig:
    log_level: str = "WARNING"
    calculator: CalculatorConfig = field(default_factory=CalculatorConfig)
    web: WebConfig = field(default_factory=WebConfig)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "AppConfig":
        data = data if isinstance(data, dict) else {}
        calc_data = data.get("calculator") if isinstance(data.get("calculator"), dict) else {}
        web_data = data.get("web") if isinstance(data.get("web"), dict) else {}

        def opt_int(src: dict[str, Any], key: str) -> int | None:
            v = src.get(key, None)
            if v is None or isinstance(v, bool):
                return None
            try:
                return int(v)
            except (TypeError, ValueError):
                return None

        output = str(calc_data.get("output", CalculatorConfig.output)).lower()
        if output not in OUTPUT_FORMATS:
            output = CalculatorConfig.output

        port = opt_int(web_data, "port")
        if port is None or not 0 < port < 65536:
            port = WebConfig.port

        log_level = str(data.get("log_level") or AppConfig.log_level).upper()
        if log_level not in LOG_LEVELS:
            log_level = AppConfig.log_level

        return AppConfig(
            log_level=log_level,
            calculator=CalculatorConfig(
                seed=opt_int(calc_data, "seed"),
                output=output,
                show_tokens=bool(calc_data.get("show_tokens", CalculatorConfig.show_tokens)),
            ),
            web=WebConfig(
                host=str(web_data.get("host") or WebConfig.host),
                port=port,
                open_browser=bool(web_data.get("open_browser", WebConfig.open_browser)),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _apply_env(cfg: AppConfig) -> AppConfig:
    seed_env = os.environ.get("DNDCALC_SEED")
    if seed_env:
        try:
            cfg = replace(cfg, calculator=replace(cfg.calculator, seed=int(seed_env)))
        except ValueError:
            logging.getLogger(__name__).warning("Ignoring non-integer DNDCALC_SEED=%r", seed_env)

    level_env = (os.environ.get("DNDCALC_LOG_LEVEL") or "").upper()
    if level_env in LOG_LEVELS:
        cfg = replace(cfg, log_level=level_env)
    return cfg


def load_config(path: Path | None = None) -> AppConfig:
    path = path or default_config_path()

    if not path.exists():
        return _apply_env(AppConfig())

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        data = {}

    return _apply_env(AppConfig.from_dict(data if isinstance(data, dict) else {}))


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    path = path or default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(cfg.to_dict(), ensure_ascii=True, indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")
    return path
