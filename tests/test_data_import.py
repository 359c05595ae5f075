"""
Comprehensive unit tests for Layer 1: Data Import
Tests the feedback model, timestamp parsing and the JSON feedback store
"""
import sys
import os
import json
import tempfile
import shutil
from datetime import datetime, timezone

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.feedback import FeedbackRecord, Sentiment, is_enterprise_source, parse_timestamp
from layer_1_data_import.storage import FeedbackStorage, StorageError
from layer_1_data_import.seed_data import SEED_FEEDBACK
from layer_2_theme_extraction.aggregator import partition_by_day
from utils.logger import get_logger

logger = get_logger(__name__)


class TestFeedbackModel:
    """Test feedback record model"""

    def test_parse_iso_timestamp(self):
        parsed = parse_timestamp("2025-01-15T10:30:00.123Z")
        assert parsed == datetime(2025, 1, 15, 10, 30, 0, 123000, tzinfo=timezone.utc)

    def test_parse_sqlite_timestamp(self):
        parsed = parse_timestamp("2025-01-15 10:30:00")
        assert parsed == datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)

    def test_parse_offset_timestamp(self):
        parsed = parse_timestamp("2025-01-15T01:00:00+02:00")
        assert parsed == datetime(2025, 1, 14, 23, 0, tzinfo=timezone.utc)

    def test_parse_invalid_timestamp(self):
        assert parse_timestamp("not a date") is None
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None

    def test_sentiment_parse(self):
        assert Sentiment.parse("Positive") is Sentiment.POSITIVE
        assert Sentiment.parse(" NEGATIVE ") is Sentiment.NEGATIVE
        assert Sentiment.parse("angry") is None

    def test_enterprise_sources(self):
        assert is_enterprise_source("Customer Support Tickets") == True
        assert is_enterprise_source("customer-support-tickets") == True
        assert is_enterprise_source("EMAIL ") == True
        assert is_enterprise_source("Discord") == False
        assert is_enterprise_source("") == False

    def test_from_dict_normalizes_sentiment(self):
        record = FeedbackRecord.from_dict({
            "id": "7",
            "source": "email",
            "sentiment": "NEGATIVE",
            "comment": "Login fails",
            "timestamp": "2025-01-15T10:00:00.000Z",
        })
        assert record.id == 7
        assert record.sentiment == "negative"
        assert record.is_negative
        assert record.is_enterprise
        assert json.loads(record.to_json())["sentiment"] == "negative"


class TestFeedbackStorage:
    """Test the JSON feedback store"""

    def test_missing_store(self):
        temp_dir = tempfile.mkdtemp()
        try:
            storage = FeedbackStorage(path=os.path.join(temp_dir, "feedback.json"))
            try:
                storage.list_feedback()
                assert False, "Expected StorageError"
            except StorageError as e:
                assert "not found" in e.args[0]
                assert "init" in e.hint
                assert "hint" in str(e)
        finally:
            shutil.rmtree(temp_dir)

    def test_corrupt_store(self):
        temp_dir = tempfile.mkdtemp()
        try:
            path = os.path.join(temp_dir, "feedback.json")
            with open(path, 'w', encoding='utf-8') as f:
                f.write("{not json")
            try:
                FeedbackStorage(path=path).list_feedback()
                assert False, "Expected StorageError"
            except StorageError as e:
                assert "Failed to read" in e.args[0]
        finally:
            shutil.rmtree(temp_dir)

    def test_store_without_feedback_list(self):
        temp_dir = tempfile.mkdtemp()
        try:
            path = os.path.join(temp_dir, "feedback.json")
            with open(path, 'w', encoding='utf-8') as f:
                json.dump({"feedback": "oops"}, f)
            try:
                FeedbackStorage(path=path).list_feedback()
                assert False, "Expected StorageError"
            except StorageError:
                pass
        finally:
            shutil.rmtree(temp_dir)

    def test_init_store(self):
        temp_dir = tempfile.mkdtemp()
        try:
            storage = FeedbackStorage(path=os.path.join(temp_dir, "nested", "feedback.json"))
            assert storage.init_store() == True
            assert storage.init_store() == False
            assert storage.list_feedback() == []
        finally:
            shutil.rmtree(temp_dir)

    def test_add_and_list_feedback(self):
        temp_dir = tempfile.mkdtemp()
        try:
            storage = FeedbackStorage(path=os.path.join(temp_dir, "feedback.json"))
            first = storage.add_feedback(
                "email", "Negative", "  Login fails  ",
                timestamp=datetime(2025, 1, 15, 10, 30, 0, 123000, tzinfo=timezone.utc),
            )
            second = storage.add_feedback(
                "Discord", "positive", "Docs are great",
                timestamp=datetime(2025, 1, 15, 11, 0, tzinfo=timezone.utc),
            )

            assert first.id == 1
            assert second.id == 2
            assert first.sentiment == "negative"
            assert first.comment == "Login fails"
            assert first.timestamp == "2025-01-15T10:30:00.123Z"

            records = storage.list_feedback()
            assert [r.id for r in records] == [2, 1]

            with open(storage.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            assert len(data["feedback"]) == 2
        finally:
            shutil.rmtree(temp_dir)

    def test_add_feedback_validation(self):
        temp_dir = tempfile.mkdtemp()
        try:
            storage = FeedbackStorage(path=os.path.join(temp_dir, "feedback.json"))
            storage.init_store()
            for source, sentiment, comment in [
                ("email", "angry", "Login fails"),
                ("", "negative", "Login fails"),
                ("email", "negative", "   "),
            ]:
                try:
                    storage.add_feedback(source, sentiment, comment)
                    assert False, "Expected ValueError"
                except ValueError:
                    pass
            assert storage.list_feedback() == []
        finally:
            shutil.rmtree(temp_dir)

    def test_add_feedback_rejects_unparsable_timestamp(self):
        temp_dir = tempfile.mkdtemp()
        try:
            storage = FeedbackStorage(path=os.path.join(temp_dir, "feedback.json"))
            storage.init_store()
            try:
                storage.add_feedback("email", "negative", "Login fails", timestamp="garbage")
                assert False, "Expected ValueError"
            except ValueError as e:
                assert "Unparsable timestamp" in str(e)
            assert storage.list_feedback() == []

            record = storage.add_feedback("email", "negative", "Login fails", timestamp="2025-01-15 10:00:00")
            assert record.timestamp == "2025-01-15T10:00:00.000Z"
        finally:
            shutil.rmtree(temp_dir)

    def test_writers_leave_no_temp_files(self):
        temp_dir = tempfile.mkdtemp()
        try:
            path = os.path.join(temp_dir, "feedback.json")
            dashboard = FeedbackStorage(path=path)
            cli = FeedbackStorage(path=path)
            dashboard.init_store()
            for i in range(3):
                dashboard.add_feedback("Discord", "positive", f"Docs are great {i}")
                cli.add_feedback("email", "negative", f"Login fails {i}")

            assert os.listdir(temp_dir) == ["feedback.json"]
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            assert [row["id"] for row in data["feedback"]] == [1, 2, 3, 4, 5, 6]
        finally:
            shutil.rmtree(temp_dir)

    def test_malformed_rows_are_skipped(self):
        temp_dir = tempfile.mkdtemp()
        try:
            path = os.path.join(temp_dir, "feedback.json")
            rows = [
                {"id": 1, "source": "email", "sentiment": "negative", "comment": "Login fails",
                 "timestamp": "2025-01-15T10:00:00.000Z"},
                {"source": "Discord", "comment": "no id"},
                {"id": "abc", "source": "Discord"},
            ]
            with open(path, 'w', encoding='utf-8') as f:
                json.dump({"feedback": rows}, f)
            records = FeedbackStorage(path=path).list_feedback()
            assert [r.id for r in records] == [1]
        finally:
            shutil.rmtree(temp_dir)

    def test_unparsable_timestamps_sort_last(self):
        temp_dir = tempfile.mkdtemp()
        try:
            path = os.path.join(temp_dir, "feedback.json")
            rows = [
                {"id": 1, "source": "email", "sentiment": "neutral", "comment": "a", "timestamp": "garbage"},
                {"id": 2, "source": "email", "sentiment": "neutral", "comment": "b",
                 "timestamp": "2025-01-14T10:00:00.000Z"},
                {"id": 3, "source": "email", "sentiment": "neutral", "comment": "c",
                 "timestamp": "2025-01-15 10:00:00"},
            ]
            with open(path, 'w', encoding='utf-8') as f:
                json.dump({"feedback": rows}, f)
            records = FeedbackStorage(path=path).list_feedback()
            assert [r.id for r in records] == [3, 2, 1]
        finally:
            shutil.rmtree(temp_dir)

    def test_seed(self):
        temp_dir = tempfile.mkdtemp()
        try:
            now = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
            storage = FeedbackStorage(path=os.path.join(temp_dir, "feedback.json"))
            count = storage.seed(now=now)

            records = storage.list_feedback()
            assert count == len(SEED_FEEDBACK)
            assert len(records) == len(SEED_FEEDBACK)

            today, yesterday = partition_by_day(records, now)
            assert len(today) == len(SEED_FEEDBACK) // 2
            assert len(yesterday) == len(SEED_FEEDBACK) // 2
        finally:
            shutil.rmtree(temp_dir)


def run_all_tests():
    """Run all test suites"""
    print("=" * 80)
    print("Layer 1 Data Import - Comprehensive Test Suite")
    print("=" * 80)

    test_classes = [
        ("Feedback Model", TestFeedbackModel),
        ("Feedback Storage", TestFeedbackStorage),
    ]

    failed_tests = []
    total_tests = 0
    for suite_name, test_class in test_classes:
        print(f"\nRunning {suite_name} Tests")
        test_instance = test_class()
        for test_method in [m for m in dir(test_instance) if m.startswith('test_')]:
            total_tests += 1
            try:
                getattr(test_instance, test_method)()
                print(f"  ✅ {test_method}")
            except Exception as e:
                print(f"  ❌ {test_method}: {e}")
                failed_tests.append((suite_name, test_method, str(e)))

    print(f"\nTotal tests: {total_tests}, Failed: {len(failed_tests)}")
    return 1 if failed_tests else 0


if __name__ == "__main__":
    sys.exit(run_all_tests())
