"""
Storage module for feedback rows (single JSON document)
"""
import json
import os
import tempfile
import threading
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from config.settings import settings
from models.feedback import FeedbackRecord, Sentiment, parse_timestamp
from layer_1_data_import.seed_data import SEED_FEEDBACK
from utils.logger import get_logger

logger = get_logger(__name__)

INIT_HINT = "Run `python main.py init` to create an empty store, or `python main.py seed` to load sample feedback."


class StorageError(Exception):
    """Feedback store cannot be read. Fatal for the request."""

    def __init__(self, message: str, hint: str = INIT_HINT):
        super().__init__(message)
        self.hint = hint

    def __str__(self):
        return f"{self.args[0]} (hint: {self.hint})"


class FeedbackStorage:
    """Read and append feedback rows stored as {"feedback": [...]}"""

    def __init__(self, path: str = None):
        """
        Initialize storage

        Args:
            path: Path of the feedback JSON file (defaults to settings.FEEDBACK_FILE)
        """
        self.path = path or settings.FEEDBACK_FILE
        self._write_lock = threading.Lock()

    def _read_rows(self) -> List[dict]:
        if not os.path.exists(self.path):
            raise StorageError(f"Feedback store not found at {self.path}")
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(
                f"Failed to read feedback from {self.path}: {e}",
                hint="Check the file is valid JSON, or re-create it with `python main.py init`.",
            ) from e

        rows = data.get('feedback') if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise StorageError(
                f"Feedback store {self.path} has no 'feedback' list",
                hint="Re-create the store with `python main.py init`.",
            )
        return rows

    def _write_rows(self, rows: List[dict]):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        # Unique temp file per writer, then an atomic swap into place
        with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=directory or '.',
                                         prefix=os.path.basename(self.path) + '.', suffix='.tmp',
                                         delete=False) as f:
            tmp_path = f.name
            try:
                json.dump({'feedback': rows}, f, indent=2, ensure_ascii=False)
            except Exception:
                f.close()
                os.remove(tmp_path)
                raise
        try:
            os.replace(tmp_path, self.path)
        except OSError:
            os.remove(tmp_path)
            raise

    def list_feedback(self) -> List[FeedbackRecord]:
        """
        Load every feedback row, newest first

        Rows that cannot be turned into a record are skipped with a warning.
        Unparsable timestamps are kept; they sort last.

        Raises:
            StorageError: if the store is missing or unreadable
        """
        records = []
        for row in self._read_rows():
            try:
                records.append(FeedbackRecord.from_dict(row))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed feedback row {row!r}: {e}")

        epoch = datetime.min.replace(tzinfo=timezone.utc)
        records.sort(key=lambda r: r.parsed_timestamp or epoch, reverse=True)
        return records

    def add_feedback(self, source: str, sentiment: str, comment: str,
                     timestamp: Optional[datetime] = None) -> FeedbackRecord:
        """
        Append one feedback row and return it with its assigned id

        Raises:
            ValueError: on empty source/comment, an unknown sentiment or an
                unparsable timestamp
        """
        parsed = Sentiment.parse(sentiment)
        if parsed is None:
            raise ValueError(f"Unknown sentiment '{sentiment}' (expected positive, neutral or negative)")
        if not (source or '').strip():
            raise ValueError("Feedback source must not be empty")
        if not (comment or '').strip():
            raise ValueError("Feedback comment must not be empty")

        moment = parse_timestamp(timestamp) if timestamp else datetime.now(timezone.utc)
        if moment is None:
            raise ValueError(f"Unparsable timestamp '{timestamp}'")

        with self._write_lock:
            rows = self._read_rows() if os.path.exists(self.path) else []
            next_id = max((int(r.get('id', 0)) for r in rows), default=0) + 1
            record = FeedbackRecord(
                id=next_id,
                source=source.strip(),
                sentiment=parsed.value,
                comment=comment.strip(),
                timestamp=moment.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            )
            rows.append(record.to_dict())
            self._write_rows(rows)

        logger.info(f"Stored feedback #{record.id} from {record.source} ({record.sentiment})")
        return record

    def init_store(self, overwrite: bool = False) -> bool:
        """
        Create an empty store

        Returns:
            True if a new file was written
        """
        if os.path.exists(self.path) and not overwrite:
            logger.info(f"Feedback store already exists at {self.path}")
            return False
        self._write_rows([])
        logger.info(f"Created empty feedback store at {self.path}")
        return True

    def seed(self, now: Optional[datetime] = None) -> int:
        """
        Load the bundled sample feedback

        Rows alternate between today and yesterday (UTC) so that the trend
        comparison has something to show right after seeding.

        Returns:
            Number of rows added
        """
        now = now or datetime.now(timezone.utc)
        if not os.path.exists(self.path):
            self.init_store()

        for idx, (source, sentiment, comment) in enumerate(SEED_FEEDBACK):
            moment = now - timedelta(days=idx % 2, minutes=idx)
            self.add_feedback(source, sentiment, comment, timestamp=moment)

        logger.info(f"Seeded {len(SEED_FEEDBACK)} feedback rows into {self.path}")
        return len(SEED_FEEDBACK)
