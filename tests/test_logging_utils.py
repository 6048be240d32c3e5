import csv
import json

import pytest

from hpa_pipeline.logging_utils import RUN_FIELDS, CSVLogger, JSONLLogger, JsonIO, RunLogger, make_run_dir


def test_csv_writes_header_once(tmp_path):
    csv_path = tmp_path / "runs.csv"
    fieldnames = ["run", "ok"]

    logger1 = CSVLogger(csv_path, fieldnames=fieldnames)
    logger1.write_row({"run": 0, "ok": True})
    logger1.close()

    logger2 = CSVLogger(csv_path, fieldnames=fieldnames)
    logger2.write_row({"run": 1, "ok": False})
    logger2.close()

    with csv_path.open(newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        header = next(reader)
        rows = list(reader)

    assert header == fieldnames
    assert rows == [["0", "True"], ["1", "False"]]


def test_csv_rejects_extra_keys(tmp_path):
    logger = CSVLogger(tmp_path / "extra.csv", fieldnames=["run", "ok"], allow_extra=False)
    logger.write_row({"run": 0, "ok": True})  # ok
    with pytest.raises(ValueError):
        logger.write_row({"run": 1, "ok": True, "seed": 3})
    logger.close()


def test_jsonl_appends_lines(tmp_path):
    jsonl_path = tmp_path / "events.jsonl"
    logger = JSONLLogger(jsonl_path, auto_timestamp=True)
    logger.log({"a": 1})
    logger.log({"a": 2})
    logger.close()

    lines = jsonl_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    rec1 = json.loads(lines[0])
    rec2 = json.loads(lines[1])
    assert rec1["a"] == 1 and "ts" in rec1
    assert rec2["a"] == 2 and "ts" in rec2


def test_run_logger_forwards_records(tmp_path):
    csv_path = tmp_path / "nested" / "runs.csv"
    jsonl_path = tmp_path / "runs.jsonl"
    record = {k: None for k in RUN_FIELDS}
    record.update(run=0, ok=True, attempts=1, seed={"entropy": "1", "spawn_key": [0]})

    with RunLogger(jsonl_path=jsonl_path, csv_path=csv_path) as rl:
        rl.log_run(record)
        rl.flush()

    with csv_path.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert list(rows[0].keys()) == RUN_FIELDS
    assert rows[0]["run"] == "0"
    (line,) = jsonl_path.read_text(encoding="utf-8").splitlines()
    assert json.loads(line)["seed"] == {"entropy": "1", "spawn_key": [0]}


def test_run_logger_without_targets_is_inert(tmp_path):
    rl = RunLogger()
    rl.log_run({"run": 0})
    rl.close()
    assert list(tmp_path.iterdir()) == []


def test_json_io_compact_by_default(tmp_path):
    path = tmp_path / "a" / "doc.json"
    JsonIO.write(path, {"edges": [[0], [1, 0]]})
    assert path.read_text(encoding="utf-8") == '{"edges":[[0],[1,0]]}'
    assert JsonIO.read(path) == {"edges": [[0], [1, 0]]}


def test_make_run_dir(tmp_path):
    d = make_run_dir(tmp_path, prefix="pa")
    assert d.is_dir() and d.parent == tmp_path and d.name.startswith("pa_")
