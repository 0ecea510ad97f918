from __future__ import annotations


class TsortError(RuntimeError):
    pass


class MalformedInputError(TsortError, ValueError):
    def __init__(self, message: str, *, token_count: int | None = None, dangling: bytes | None = None) -> None:
        super().__init__(message)
        self.token_count = token_count
        self.dangling = dangling


class InvariantError(TsortError):
    """
    Internal consistency failure (a bug, never a property of the input).
    """


class ConfigError(TsortError, ValueError):
    def __init__(self, message: str, *, env_var: str | None = None) -> None:
        super().__init__(message)
        self.env_var = env_var
