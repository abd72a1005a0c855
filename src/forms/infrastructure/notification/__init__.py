from .toast_center import Toast, ToastCenter

__all__ = ["Toast", "ToastCenter"]
