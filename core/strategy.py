"""认证策略与宿主框架之间的约定

策略不继承任何框架基类：宿主在每次认证时传入一个 StrategyContext，
策略只通过 success / fail / error 三个终止信号之一把结果交回宿主。
"""

from typing import Any, Literal, Optional, Protocol

from pydantic import BaseModel, ConfigDict


class StrategyContext(Protocol):
    """宿主提供的终止信号，每次认证恰好调用其中一个"""

    def success(self, user: Any, info: Any = None) -> None: ...

    def fail(self, info: Any = None) -> None: ...

    def error(self, err: Any) -> None: ...


class Strategy(Protocol):
    """宿主可调用的认证策略"""

    name: str

    async def authenticate(self, request: Any, context: StrategyContext) -> None: ...


class AuthOutcome(BaseModel):
    """一次认证的最终结果"""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    status: Literal["success", "fail", "error"]
    user: Any = None
    info: Any = None
    error: Any = None


class AuthenticationAttempt:
    """记录单次认证结果的 StrategyContext，重复终止会抛出 RuntimeError"""

    def __init__(self) -> None:
        self.outcome: Optional[AuthOutcome] = None

    @property
    def completed(self) -> bool:
        return self.outcome is not None

    def _finish(self, outcome: AuthOutcome) -> None:
        if self.outcome is not None:
            raise RuntimeError(f"authentication attempt already ended with {self.outcome.status}")
        self.outcome = outcome

    def success(self, user: Any, info: Any = None) -> None:
        self._finish(AuthOutcome(status="success", user=user, info=info))

    def fail(self, info: Any = None) -> None:
        self._finish(AuthOutcome(status="fail", info=info))

    def error(self, err: Any) -> None:
        self._finish(AuthOutcome(status="error", error=err))
