from .unload_guard_registry import BeforeUnloadEvent, UnloadGuardRegistry

__all__ = ["BeforeUnloadEvent", "UnloadGuardRegistry"]
