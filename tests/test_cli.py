# File: tests/test_cli.py

import json
import logging

from filesize_recon.cli import main
from filesize_recon.db.session import build_engine, build_session_factory
from filesize_recon.services.file_count_store import FileCountBySizeStore


def read_counts(database_url):
    engine = build_engine(database_url)
    try:
        return FileCountBySizeStore(build_session_factory(engine)).read_all()
    finally:
        engine.dispose()


def test_reprocess_then_process(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'recon.db'}"
    data = tmp_path / "data"
    data.mkdir()
    (data / "a.txt").write_bytes(b"a" * 100)
    (data / "b.bin").write_bytes(b"b" * 3000)

    assert main(["--database-url", database_url, "reprocess", "--root", str(data)]) == 0
    rows = read_counts(database_url)
    assert len(rows) == 42
    assert rows[0] == (1024, 1)
    assert rows[2] == (4096, 1)

    events = tmp_path / "events.jsonl"
    events.write_text(
        "\n".join(
            json.dumps(e)
            for e in [
                {"action": "DELETE", "key": "a.txt", "value": {"data_size": 100}},
                {"action": "PUT", "key": "c.log", "value": {"data_size": 2_000_000}},
                {"action": "PUT", "key": "vol", "value": {"data_size": 10}, "table": "volumeTable"},
            ]
        ),
        encoding="utf-8",
    )

    assert main(["--database-url", database_url, "process", "--events", str(events)]) == 0
    rows = dict(read_counts(database_url))
    assert rows[1024] == 0
    assert rows[4096] == 1
    assert rows[2**21] == 1
    assert sum(rows.values()) == 2


def test_reprocess_missing_directory_fails(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'recon.db'}"
    assert main(["--database-url", database_url, "reprocess", "--root", str(tmp_path / "missing")]) == 1
    assert read_counts(database_url) == []


def test_process_bad_events_file_fails(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'recon.db'}"
    assert main(["--database-url", database_url, "process", "--events", str(tmp_path / "none.jsonl")]) == 1


def test_process_logs_last_sequence_number(tmp_path, caplog):
    database_url = f"sqlite:///{tmp_path / 'recon.db'}"
    events = tmp_path / "events.jsonl"
    events.write_text(
        json.dumps({"action": "PUT", "key": "k", "value": {"data_size": 10}, "sequence_number": 17}) + "\n",
        encoding="utf-8",
    )

    with caplog.at_level(logging.INFO, logger="filesize_recon.cli"):
        assert main(["--database-url", database_url, "process", "--events", str(events)]) == 0

    assert "up to sequence number 17" in caplog.text


def test_process_empty_events_file(tmp_path, caplog):
    database_url = f"sqlite:///{tmp_path / 'recon.db'}"
    events = tmp_path / "events.jsonl"
    events.write_text("\n", encoding="utf-8")

    with caplog.at_level(logging.INFO, logger="filesize_recon.cli"):
        assert main(["--database-url", database_url, "process", "--events", str(events)]) == 0

    assert "No events in" in caplog.text
    assert len(read_counts(database_url)) == 42
