from __future__ import annotations

# backend/settings.py
import os
import yaml

# 配置解析顺序：
# 1) 环境变量 DATABASE_URL / LOG_LEVEL（最高优先级）
# 2) 项目根 config.yaml 的 database_url / log_level
# 3) 兜底默认值
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))

DEFAULT_DATABASE_URL = "sqlite:///users.db"
DEFAULT_LOG_LEVEL = "INFO"

HOST = "127.0.0.1"
PORT = 3000
POOL_SIZE = 5

APP_NAME = "users-api"
APP_VERSION = "0.1.0"


def _read_config_yaml() -> dict:
    cfg_path = os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(cfg, dict):
        return {}
    out = {}
    for k in ("database_url", "log_level"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    return out


def get_database_url() -> str:
    env_url = os.environ.get("DATABASE_URL")
    if env_url:
        return env_url
    return _read_config_yaml().get("database_url", DEFAULT_DATABASE_URL)


def get_log_level() -> str:
    env_level = os.environ.get("LOG_LEVEL")
    if env_level:
        return env_level.upper()
    return _read_config_yaml().get("log_level", DEFAULT_LOG_LEVEL).upper()
