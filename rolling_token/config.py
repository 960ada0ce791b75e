from __future__ import annotations

"""グローバル設定・定数をまとめたモジュール。

- スロット間隔（秒）の既定値
- 許容スロット数（前後）の既定値
- 環境変数による上書き（RT_INTERVAL / RT_TOLERANCE / RT_SECRET）
"""

import os
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidInterval, InvalidTolerance


# スロット
DEFAULT_INTERVAL = 30  # 秒
DEFAULT_TOLERANCE = 1  # 前後それぞれのスロット数

# HMAC-SHA256 の 16 進表現の長さ
DIGEST_HEX_LENGTH = 64

# 環境変数名
ENV_INTERVAL = "RT_INTERVAL"
ENV_TOLERANCE = "RT_TOLERANCE"
ENV_SECRET = "RT_SECRET"


@dataclass(frozen=True)
class Settings:
    """マネージャ生成用の設定値。"""

    interval: int
    tolerance: int
    secret: Optional[str] = None

    def __repr__(self) -> str:
        masked = None if self.secret is None else "***"
        return f"Settings(interval={self.interval}, tolerance={self.tolerance}, secret={masked})"


def _env_int(name: str, default: int, error: type) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise error(f"{name} は整数で指定してください: {raw!r}") from None


def get_settings() -> Settings:
    """環境変数を反映した設定を返す。

    備考: 値の範囲チェック（interval > 0, tolerance >= 0）もここで行う。
    """

    interval = _env_int(ENV_INTERVAL, DEFAULT_INTERVAL, InvalidInterval)
    if interval <= 0:
        raise InvalidInterval(f"{ENV_INTERVAL} は正の整数である必要があります: {interval}")
    tolerance = _env_int(ENV_TOLERANCE, DEFAULT_TOLERANCE, InvalidTolerance)
    if tolerance < 0:
        raise InvalidTolerance(f"{ENV_TOLERANCE} は 0 以上である必要があります: {tolerance}")
    return Settings(interval=interval, tolerance=tolerance, secret=os.getenv(ENV_SECRET) or None)
