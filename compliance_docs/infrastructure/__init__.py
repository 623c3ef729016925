"""Infrastructure layer exports."""

from .mirror import (
    MirrorClient,
    MirrorError,
    NoOpMirrorClient,
    SheetsMirrorClient,
    configure_mirror_client,
    get_mirror_client,
)
from .records import InMemoryRecordStore, RecordStore, RecordStoreError, RestRecordStore
from .templates import FileSystemTemplateStore, StorageTemplateStore, TemplateRef, TemplateRegistry, TemplateStore

__all__ = [
    "FileSystemTemplateStore",
    "InMemoryRecordStore",
    "MirrorClient",
    "MirrorError",
    "NoOpMirrorClient",
    "RecordStore",
    "RecordStoreError",
    "RestRecordStore",
    "SheetsMirrorClient",
    "StorageTemplateStore",
    "TemplateRef",
    "TemplateRegistry",
    "TemplateStore",
    "configure_mirror_client",
    "get_mirror_client",
]
