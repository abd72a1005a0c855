from .dirty_tracker import DirtyTracker
from .auto_save_scheduler import AutoSaveScheduler
from .save_status import SaveStatus, SaveStatusView, describe_save_status, format_last_saved

__all__ = [
    "DirtyTracker",
    "AutoSaveScheduler",
    "SaveStatus",
    "SaveStatusView",
    "describe_save_status",
    "format_last_saved",
]
