from .navigation_guard import NavigationGuard

__all__ = ["NavigationGuard"]
