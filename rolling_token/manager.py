from __future__ import annotations

"""ローリングトークン管理（時刻スロット × HMAC-SHA256）。"""

import hmac
from typing import List, Optional, Tuple, Union

from loguru import logger

from . import config
from .clock import Clock, system_clock
from .derivation import Token, derive_token, slot_for
from .errors import InvalidInterval, InvalidTolerance, SecretWiped


SecretLike = Union[bytes, bytearray, str]


class RollingTokenManager:
    """共有シークレットから時刻スロットごとのトークンを発行・検証する。

    - 発行: 現在スロット + offset の HMAC を返す（状態は変更しない）
    - 検証: 有効ウィンドウ [now − tolerance, now + tolerance] を更新してから照合
    - ウィンドウは差分更新（スロットが 1 進むと端の 2 個だけが入れ替わる）

    スレッドセーフではない。is_valid / refresh を複数スレッドから呼ぶ場合は
    呼び出し側で排他すること。
    """

    def __init__(
        self,
        secret: SecretLike,
        interval: int,
        tolerance: Optional[int] = None,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            raise InvalidInterval(f"interval は正の整数である必要があります: {interval!r}")
        if tolerance is None:
            tolerance = config.DEFAULT_TOLERANCE
        if isinstance(tolerance, bool) or not isinstance(tolerance, int) or tolerance < 0:
            raise InvalidTolerance(f"tolerance は 0 以上の整数である必要があります: {tolerance!r}")
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        if not isinstance(secret, (bytes, bytearray)):
            raise TypeError(f"secret は bytes か str で指定してください: {type(secret).__name__}")

        self._secret: bytearray = bytearray(secret)
        self._wiped = False
        self.interval = interval
        self.tolerance = tolerance
        self._clock: Clock = clock or system_clock
        self._active: List[Token] = []
        self._highest_slot: Optional[int] = None

    @classmethod
    def from_env(cls, secret: Optional[SecretLike] = None, *, clock: Optional[Clock] = None) -> "RollingTokenManager":
        """環境変数（RT_INTERVAL / RT_TOLERANCE / RT_SECRET）から生成する。"""

        settings = config.get_settings()
        key = secret if secret is not None else settings.secret
        if key is None:
            raise RuntimeError(f"{config.ENV_SECRET} が未設定です。secret を渡すか、環境変数を設定してください。")
        return cls(key, settings.interval, settings.tolerance, clock=clock)

    def __repr__(self) -> str:
        return (
            f"RollingTokenManager(interval={self.interval}, tolerance={self.tolerance}, "
            f"active={len(self._active)}, wiped={self._wiped})"
        )

    def __enter__(self) -> "RollingTokenManager":
        return self

    def __exit__(self, *exc: object) -> None:
        self.wipe()

    @property
    def window_size(self) -> int:
        return 1 + 2 * self.tolerance

    @property
    def active_tokens(self) -> Tuple[Token, ...]:
        """現在の有効ウィンドウ（スロット昇順のスナップショット）。"""

        return tuple(sorted(self._active, key=lambda t: t.timestamp))

    def current_slot(self) -> int:
        """現在のスロット番号 floor(unix 秒 / interval) を返す。"""

        return slot_for(self._clock(), self.interval)

    # 発行 --------------------------------------------------------------------

    def generate_token_with_offset(self, offset: int) -> Token:
        """現在スロット + offset のトークンを返す。"""

        self._ensure_secret()
        return derive_token(self._secret, self.current_slot() + int(offset))

    def generate_token(self) -> Token:
        """現在スロットのトークンを返す。"""

        return self.generate_token_with_offset(0)

    # 検証 --------------------------------------------------------------------

    def refresh(self) -> None:
        """有効ウィンドウを現在スロットに合わせて更新する。

        1. 範囲外（|slot − now| > tolerance）のトークンを除去
        2. 既に 1 + 2*tolerance 個なら終了
        3. 不足スロットのみ生成して追加（now は 1 回だけ読む）
        新しいウィンドウを別リストで組み立ててから差し替える。
        """

        self._ensure_secret()
        now = self.current_slot()
        if self._highest_slot is not None and now < self._highest_slot:
            logger.warning("時刻の巻き戻りを検知: スロット {} → {}", self._highest_slot, now)
        if self._highest_slot is None or now > self._highest_slot:
            self._highest_slot = now

        kept = [t for t in self._active if abs(t.timestamp - now) <= self.tolerance]
        if len(kept) == self.window_size:
            self._active = kept
            return

        present = {t.timestamp for t in kept}
        missing = [s for s in range(now - self.tolerance, now + self.tolerance + 1) if s not in present]
        for slot in missing:
            kept.append(derive_token(self._secret, slot))
        logger.debug("ウィンドウ更新: now={} 追加={} 保持={}", now, len(missing), len(kept) - len(missing))
        self._active = kept

    def check(self, candidate: str) -> bool:
        """現在のウィンドウに candidate が含まれるかを返す（更新はしない）。"""

        self._ensure_secret()
        if not isinstance(candidate, str):
            return False
        # compare_digest は非 ASCII の str を受け付けない
        try:
            raw = candidate.encode("ascii")
        except UnicodeEncodeError:
            return False
        return any(hmac.compare_digest(t.token.encode("ascii"), raw) for t in self._active)

    def is_valid(self, candidate: str) -> bool:
        """ウィンドウを更新してから candidate を照合する。"""

        self.refresh()
        return self.check(candidate)

    # シークレット ------------------------------------------------------------

    def wipe(self) -> None:
        """シークレットをゼロ埋めして破棄する。以後の発行・検証は SecretWiped。"""

        for i in range(len(self._secret)):
            self._secret[i] = 0
        self._secret.clear()
        self._active = []
        self._wiped = True

    def _ensure_secret(self) -> None:
        if self._wiped:
            raise SecretWiped("シークレットは破棄済みです")
