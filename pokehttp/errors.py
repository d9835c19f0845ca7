from __future__ import annotations


class PokeError(Exception):
    pass


class RequestFileError(PokeError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class UndefinedVariableError(PokeError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Undefined variable: {name}")
        self.name = name


class TransportError(PokeError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportTimeout(TransportError):
    def __init__(self) -> None:
        super().__init__("Timeout")
