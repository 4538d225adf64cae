import threading

from earnings.data import parse_csv_records
from earnings.ingest import NO_INITIAL_DATA_MESSAGE, EntryStore, ingest
from earnings.models import Entry

from conftest import make_entry


class TestIngest:
    def test_duplicate_is_rejected(self):
        existing = [make_entry("A", "2025-01-06"), make_entry("B", "2025-01-07")]
        result = ingest(existing, [{"item_id": "A", "work_date": "2025-01-06", "duration": "9h"}])
        assert result.added_count == 0
        assert result.duplicate_count == 1
        assert result.merged == existing

    def test_new_records_are_appended_in_order(self):
        existing = [make_entry("A", "2025-01-06")]
        result = ingest(
            existing,
            [{"item_id": "C", "work_date": "2025-01-09"}, {"item_id": "B", "work_date": "2025-01-08"}],
        )
        assert [e.item_id for e in result.merged] == ["A", "C", "B"]
        assert result.merged[0] is existing[0]
        assert result.added_count == 2

    def test_existing_list_is_not_mutated(self):
        existing = [make_entry("A", "2025-01-06")]
        ingest(existing, [{"item_id": "B", "work_date": "2025-01-07"}])
        assert len(existing) == 1

    def test_same_item_on_another_day_is_new(self):
        result = ingest([make_entry("A", "2025-01-06")], [{"item_id": "A", "work_date": "2025-01-07"}])
        assert result.added_count == 1

    def test_records_without_item_or_date_are_dropped(self):
        result = ingest([], [{"duration": "1h", "payout": "$5"}])
        assert result.added_count == 0
        assert result.duplicate_count == 1

    def test_repeats_within_one_batch(self):
        record = {"item_id": "A", "work_date": "2025-01-06"}
        result = ingest([], [record, dict(record)])
        assert result.added_count == 1
        assert result.duplicate_count == 1

    def test_idempotent(self, sample_csv):
        records = parse_csv_records(sample_csv)
        first = ingest([], records)
        second = ingest(first.merged, records)
        assert second.added_count == 0
        assert second.merged == first.merged

    def test_accepts_entries(self):
        entry = Entry(item_id="A", work_date="2025-01-06")
        assert ingest([], [entry]).merged == [entry]


class TestEntryStore:
    def test_upload_text_reports_counts(self, sample_csv):
        store = EntryStore()
        status = store.upload_text(sample_csv, source="report.csv")
        assert status.ok
        assert status.added_count == 4
        assert status.message == "Added 4 new entries (0 duplicates skipped)"

        again = store.upload_text(sample_csv)
        assert again.added_count == 0
        assert again.message == "Added 0 new entries (4 duplicates skipped)"

    def test_weeks_recomputed_after_ingest(self, sample_csv):
        store = EntryStore()
        store.upload_text(sample_csv)
        entries, weeks = store.snapshot()
        assert len(entries) == 4
        assert len(weeks) == 2
        assert sum(w.entry_count for w in weeks) == 3

    def test_skipped_rows_reported(self):
        status = EntryStore().upload_text("itemID,workDate\nA,2025-01-06\nshort\n")
        assert status.added_count == 1
        assert status.skipped_rows == 1

    def test_undecodable_upload_leaves_store_untouched(self, sample_csv):
        store = EntryStore()
        store.upload_text(sample_csv)
        status = store.upload_bytes(b"\xff\xfe\xfa", source="bad.csv")
        assert not status.ok
        assert len(store.entries) == 4

    def test_utf8_bom_is_ignored(self):
        status = EntryStore().upload_bytes("itemID,workDate\nA,2025-01-06\n".encode("utf-8-sig"))
        assert status.added_count == 1

    def test_missing_initial_file(self, tmp_path):
        status = EntryStore().load_file(tmp_path / "missing.csv")
        assert not status.ok
        assert status.message == NO_INITIAL_DATA_MESSAGE

    def test_load_file(self, tmp_path, sample_csv):
        path = tmp_path / "Earnings_Report.csv"
        path.write_text(sample_csv, encoding="utf-8")
        store = EntryStore()
        assert store.load_file(path).added_count == 4

    def test_concurrent_uploads_never_duplicate(self, sample_csv):
        store = EntryStore()
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            store.upload_text(sample_csv)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        keys = [e.identity_key for e in store.entries]
        assert len(keys) == 4
        assert len(set(keys)) == 4
