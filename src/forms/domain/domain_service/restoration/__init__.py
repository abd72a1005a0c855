from .draft_restoration import DraftRestoration

__all__ = ["DraftRestoration"]
