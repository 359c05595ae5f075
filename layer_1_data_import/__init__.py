"""
Layer 1: Feedback storage
- JSON file store (ordered read of all rows, append)
- Sample seed data
"""
from .storage import FeedbackStorage, StorageError
from .seed_data import SEED_FEEDBACK

__all__ = [
    'FeedbackStorage',
    'StorageError',
    'SEED_FEEDBACK',
]
