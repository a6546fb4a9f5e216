from .dispatcher import MemoryDispatcher, render_envelope
from .results import Err, Ok, Result
from .store import RecordStore, StoreError, SupabaseRecordStore

__all__ = [
    "MemoryDispatcher",
    "render_envelope",
    "Ok",
    "Err",
    "Result",
    "RecordStore",
    "StoreError",
    "SupabaseRecordStore",
]
