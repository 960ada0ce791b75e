from __future__ import annotations

"""スロット計算とトークン導出（HMAC-SHA256）。

トークン = hex(HMAC-SHA256(key=secret, message=str(slot)))
slot は 10 進文字列（先頭ゼロなし、負数は "-" 付き）で MAC に入力する。
他実装との相互運用のため、このエンコードはバイト単位で一致させること。
"""

import hashlib
import math
import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .manager import RollingTokenManager


@dataclass(frozen=True)
class Token:
    """導出済みトークン。

    - token: 小文字 16 進（64 文字）
    - timestamp: スロット番号
    """

    token: str
    timestamp: int

    def offset(self, manager: "RollingTokenManager") -> int:
        """manager の現在スロットからの相対位置を返す。"""

        return self.timestamp - manager.current_slot()


def slot_for(unix_seconds: float, interval: int) -> int:
    """UNIX 秒をスロット番号に量子化する（秒単位に切り捨ててから floor 除算）。"""

    return math.floor(unix_seconds) // interval


def encode_slot(slot: int) -> bytes:
    """スロット番号を MAC 入力用の 10 進 ASCII に変換する。"""

    return str(int(slot)).encode("ascii")


def derive_token(secret: bytes | bytearray, slot: int) -> Token:
    """secret とスロットからトークンを導出する。鍵長の制約はない。"""

    digest = hmac.new(secret, encode_slot(slot), hashlib.sha256).hexdigest()
    return Token(token=digest, timestamp=int(slot))
