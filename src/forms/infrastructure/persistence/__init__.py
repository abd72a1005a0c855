from .draft_serializer import CURRENT_SCHEMA_VERSION, DraftSerializer
from .exceptions import (
    DatabaseConfigError,
    DatabaseConnectionError,
    DraftCorruptionError,
    DraftPersistenceError,
)
from .form_draft_model import FormDraftModel
from .form_draft_repository import DraftNotFound, FormDraftRepository
from .migration_chain import DraftMigrationChain
from .peewee_draft_store import PeeweeDraftStore

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "DraftSerializer",
    "DatabaseConfigError",
    "DatabaseConnectionError",
    "DraftCorruptionError",
    "DraftPersistenceError",
    "FormDraftModel",
    "DraftNotFound",
    "FormDraftRepository",
    "DraftMigrationChain",
    "PeeweeDraftStore",
]
