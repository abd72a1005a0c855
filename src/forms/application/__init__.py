from .form_editing_session import FormEditingSession

__all__ = ["FormEditingSession"]
