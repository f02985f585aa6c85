"""配置模块 -- 可通过环境变量覆盖

包含数据库路径、存储后端选择、远端 BaaS 连接参数、计时器默认时长等可配置项。
"""

import os
from pathlib import Path
from typing import Literal

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("FOCUSDESK_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "FOCUSDESK_DB_PATH",
        str(_get_base_dir() / "sqlite" / "focusdesk.db"),
    )


# SSE 心跳间隔（秒）
SSE_HEARTBEAT_INTERVAL: int = int(
    os.environ.get("FOCUSDESK_SSE_HEARTBEAT_INTERVAL", "15")
)

# 每个 owner 保留的通知历史条数
NOTIFICATION_HISTORY_SIZE: int = int(
    os.environ.get("FOCUSDESK_NOTIFICATION_HISTORY", "50")
)

# 未携带 X-Owner-ID 时使用的 owner
DEFAULT_OWNER_ID: str = "owner"


class AppConfig(BaseModel):
    """应用配置 -- 从环境变量加载

    环境变量:
        FOCUSDESK_STORE_MODE: 存储后端（sqlite/http/memory）
        FOCUSDESK_BAAS_URL: 远端 BaaS 基础 URL
        FOCUSDESK_BAAS_KEY: 远端 BaaS 访问密钥
        FOCUSDESK_BAAS_TIMEOUT_S: 远端调用超时（秒，默认 10）
        FOCUSDESK_FOCUS_MINUTES / FOCUSDESK_BREAK_MINUTES: 计时器默认时长
        FOCUSDESK_TICK_INTERVAL_S: tick 间隔（秒，默认 1.0）
    """

    store_mode: Literal["sqlite", "http", "memory"] = Field(
        default="sqlite",
        description="存储后端：sqlite / http / memory",
    )
    db_path: str = Field(default_factory=get_db_path, description="SQLite 数据库路径")
    baas_url: str = Field(
        default="http://localhost:54321",
        description="远端 BaaS 基础 URL",
    )
    baas_key: SecretStr = Field(
        default=SecretStr(""),
        description="远端 BaaS 访问密钥",
    )
    baas_timeout_s: float = Field(default=10.0, gt=0, description="远端调用超时（秒）")
    focus_minutes: int = Field(default=25, ge=1, description="默认专注时长（分钟）")
    break_minutes: int = Field(default=5, ge=1, description="默认休息时长（分钟）")
    tick_interval_s: float = Field(default=1.0, gt=0, description="tick 间隔（秒）")


def _read_number(env_var: str, cast: type, fallback: float) -> float | None:
    """读取数值型环境变量

    所有数值项都必须为正数；无法解析或不为正数时记录警告并返回 None（使用默认值）。
    """
    val = os.environ.get(env_var)
    if not val:
        return None
    try:
        value = cast(val)
    except ValueError:
        value = None
    # NaN 同样不满足 > 0
    if value is None or not value > 0:
        log.warning(
            "invalid_numeric_config",
            env_var=env_var,
            value=val,
            fallback=fallback,
        )
        return None
    return value


def load_app_config() -> AppConfig:
    """从环境变量加载应用配置

    Returns:
        AppConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("FOCUSDESK_STORE_MODE"):
        kwargs["store_mode"] = val

    if val := os.environ.get("FOCUSDESK_BAAS_URL"):
        kwargs["baas_url"] = val

    if val := os.environ.get("FOCUSDESK_BAAS_KEY"):
        kwargs["baas_key"] = SecretStr(val)

    numeric = [
        ("baas_timeout_s", "FOCUSDESK_BAAS_TIMEOUT_S", float, 10.0),
        ("focus_minutes", "FOCUSDESK_FOCUS_MINUTES", int, 25),
        ("break_minutes", "FOCUSDESK_BREAK_MINUTES", int, 5),
        ("tick_interval_s", "FOCUSDESK_TICK_INTERVAL_S", float, 1.0),
    ]
    for field_name, env_var, cast, fallback in numeric:
        value = _read_number(env_var, cast, fallback)
        if value is not None:
            kwargs[field_name] = value

    return AppConfig(**kwargs)
