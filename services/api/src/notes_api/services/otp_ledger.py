"""一次性验证码台账。

每个邮箱最多保留一条有效验证码，重复申请会覆盖旧码；
验证成功即删除（单次使用），验证失败不消耗当前验证码。
同一邮箱的签发与校验通过分段锁串行化；锁数量固定，不随邮箱数量增长。
"""

from collections.abc import Callable
from dataclasses import dataclass
import hmac
import secrets
from threading import Lock
import time

OTP_MIN = 100000
OTP_MAX = 999999
LOCK_STRIPES = 64


@dataclass(frozen=True)
class OtpEntry:
    """一条待验证的验证码记录。"""

    # 六位数字验证码。
    code: str
    # 签发时刻（单调时钟秒数）。
    issued_at: float


def generate_otp() -> str:
    """在 [100000, 999999] 区间内均匀生成六位验证码。"""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


class OtpLedger:
    """进程内验证码台账。"""

    def __init__(
        self,
        *,
        ttl_seconds: int = 600,
        enforce_expiry: bool = True,
        clock: Callable[[], float] = time.monotonic,
        generator: Callable[[], str] = generate_otp,
        lock_stripes: int = LOCK_STRIPES,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.enforce_expiry = enforce_expiry
        self._clock = clock
        self._generator = generator
        self._entries: dict[str, OtpEntry] = {}
        self._stripes: tuple[Lock, ...] = tuple(Lock() for _ in range(max(1, lock_stripes)))

    def _lock_for(self, email: str) -> Lock:
        return self._stripes[hash(email) % len(self._stripes)]

    def _is_expired(self, entry: OtpEntry) -> bool:
        if not self.enforce_expiry:
            return False
        return self._clock() - entry.issued_at >= self.ttl_seconds

    def issue(self, email: str) -> str:
        """签发新验证码并覆盖该邮箱下的旧码。"""
        code = self._generator()
        with self._lock_for(email):
            self._entries[email] = OtpEntry(code=code, issued_at=self._clock())
        return code

    def verify(self, email: str, candidate: str) -> bool:
        """校验验证码；成功时删除记录，失败时保留。

        记录不存在、已过期与验证码不匹配均返回 False，调用方不应区分。
        """
        with self._lock_for(email):
            entry = self._entries.get(email)
            if entry is None:
                return False
            if self._is_expired(entry):
                del self._entries[email]
                return False
            if not hmac.compare_digest(entry.code.encode("utf-8"), str(candidate).encode("utf-8")):
                return False
            del self._entries[email]
            return True

    def purge_expired(self) -> int:
        """清理全部过期记录，返回清理条数。"""
        if not self.enforce_expiry:
            return 0
        removed = 0
        for email in list(self._entries):
            with self._lock_for(email):
                entry = self._entries.get(email)
                if entry is not None and self._is_expired(entry):
                    del self._entries[email]
                    removed += 1
        return removed
