"""ローリングトークンの発行・検証を試す小さなツール。

- generate: 現在スロット（+offset）のトークンを出力
- verify:   トークンが有効ウィンドウ内かを判定（無効なら終了コード 1）
- window:   現在の有効ウィンドウを一覧表示

シークレットは --secret か環境変数 RT_SECRET で指定します。
"""

import argparse
import sys
from typing import List, Optional

from loguru import logger

from rolling_token import config
from rolling_token.manager import RollingTokenManager


def build_manager(args: argparse.Namespace) -> RollingTokenManager:
    """引数と環境変数からマネージャを組み立てます。"""
    settings = config.get_settings()
    secret = args.secret or settings.secret
    if not secret:
        raise SystemExit(f"シークレットが未指定です（--secret または {config.ENV_SECRET}）")
    interval = args.interval if args.interval is not None else settings.interval
    tolerance = args.tolerance if args.tolerance is not None else settings.tolerance
    return RollingTokenManager(secret, interval, tolerance)


def main(argv: Optional[List[str]] = None) -> int:
    """CLI エントリポイント。

    例:
        python scripts/token_tool.py --secret s3cr3t generate --offset 1
        RT_SECRET=s3cr3t python scripts/token_tool.py verify <token>
    """
    p = argparse.ArgumentParser(description="ローリングトークンの発行・検証")
    p.add_argument("--secret", type=str, default=None, help="共有シークレット（省略時は RT_SECRET）")
    p.add_argument("--interval", type=int, default=None, help="スロット間隔（秒）")
    p.add_argument("--tolerance", type=int, default=None, help="前後の許容スロット数")
    sub = p.add_subparsers(dest="command", required=True)
    gen = sub.add_parser("generate", help="トークンを発行")
    gen.add_argument("--offset", type=int, default=0, help="現在スロットからのオフセット")
    ver = sub.add_parser("verify", help="トークンを検証")
    ver.add_argument("token", type=str)
    sub.add_parser("window", help="有効ウィンドウを表示")
    args = p.parse_args(argv)

    with build_manager(args) as mgr:
        if args.command == "generate":
            tok = mgr.generate_token_with_offset(args.offset)
            print(f"{tok.timestamp} {tok.token}")
            return 0
        if args.command == "verify":
            ok = mgr.is_valid(args.token)
            logger.info("検証結果: {}", "有効" if ok else "無効")
            print("valid" if ok else "invalid")
            return 0 if ok else 1
        mgr.refresh()
        now = mgr.current_slot()
        for tok in mgr.active_tokens:
            print(f"{tok.timestamp - now:+d} {tok.timestamp} {tok.token}")
        return 0


if __name__ == "__main__":
    sys.exit(main())
