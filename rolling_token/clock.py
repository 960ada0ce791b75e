from __future__ import annotations

"""時刻ソース（UNIX 秒）。

マネージャは `Clock`（引数なしで UNIX 秒を返す callable）を受け取る。
テストでは FixedClock で任意の時刻に固定できる。
"""

import time
from typing import Callable


Clock = Callable[[], float]


def system_clock() -> float:
    """現在の UNIX 時刻（秒）を返す。"""

    return time.time()


class FixedClock:
    """手動で進める時計。"""

    def __init__(self, now: float = 0.0) -> None:
        self.now = float(now)

    def __call__(self) -> float:
        return self.now

    def set(self, now: float) -> None:
        self.now = float(now)

    def advance(self, seconds: float) -> None:
        self.now += seconds
