from __future__ import annotations

"""例外クラス。"""


class RollingTokenError(Exception):
    """rolling_token の例外の基底クラス。"""


class InvalidInterval(RollingTokenError, ValueError):
    """スロット間隔が正の整数でない。"""


class InvalidTolerance(RollingTokenError, ValueError):
    """許容スロット数が 0 以上の整数でない。"""


class SecretWiped(RollingTokenError, RuntimeError):
    """wipe() 済みのマネージャを使用した。"""
