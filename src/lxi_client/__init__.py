# Lightweight package init: the CLI and config stack load only when asked for.
__all__ = ["LxiDevice", "Emulator", "LxiError", "AlreadyConnected", "NotConnected", "NetworkFailure"]

def __getattr__(name):
    if name == "LxiDevice":
        from .devices.lxi import LxiDevice as _LxiDevice
        return _LxiDevice
    if name == "Emulator":
        from .emulator import Emulator as _Emulator
        return _Emulator
    if name in ("LxiError", "AlreadyConnected", "NotConnected", "NetworkFailure"):
        from . import errors
        return getattr(errors, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
