import json

import pytest

from pool_tags.engine.exporter import FileExporter
from pool_tags.engine.records import TAG_COLUMNS, NormalizedTag


def _row(index: int) -> dict:
    return NormalizedTag(
        contract_address=f"eip155:1:0x{index:040x}",
        public_name_tag="Stable Pool v1",
        project_name="Balancer v3",
        ui_website_link="https://balancer.fi",
        public_note="A Balancer v3 'Stable' pool. Params: amp=200.",
    ).as_dict()


def test_file_exporter_json(tmp_path):
    exporter = FileExporter(tmp_path, "demo", "json", run_tag="test")
    exporter.export(_row(1))
    exporter.export(_row(2))
    exporter.flush()
    exporter.close()
    path = tmp_path / "demo-test.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert [item["Contract Address"] for item in data] == [
        f"eip155:1:0x{1:040x}",
        f"eip155:1:0x{2:040x}",
    ]
    assert exporter.count == 2


def test_file_exporter_json_without_rows_writes_empty_array(tmp_path):
    exporter = FileExporter(tmp_path, "demo", "json", run_tag="empty")
    exporter.flush()
    exporter.close()
    assert json.loads((tmp_path / "demo-empty.json").read_text(encoding="utf-8")) == []


def test_file_exporter_jsonl(tmp_path):
    exporter = FileExporter(tmp_path, "demo", "jsonl", run_tag="test")
    exporter.export_many([_row(1), _row(2)])
    exporter.flush()
    exporter.close()
    path = tmp_path / "demo-test.jsonl"
    data = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert len(data) == 2
    assert data[0]["Public Name Tag"] == "Stable Pool v1"


def test_file_exporter_csv(tmp_path):
    exporter = FileExporter(tmp_path, "demo", "csv", run_tag="test")
    exporter.export(_row(1))
    exporter.export(_row(2))
    exporter.flush()
    exporter.close()
    path = tmp_path / "demo-test.csv"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == ",".join(TAG_COLUMNS)
    assert lines[1].startswith(f"eip155:1:0x{1:040x},Stable Pool v1,Balancer v3,")
    assert len(lines) == 3


def test_file_exporter_rejects_unknown_format(tmp_path):
    with pytest.raises(ValueError):
        FileExporter(tmp_path, "demo", "txt", run_tag="test")


def test_file_exporter_close_is_idempotent(tmp_path):
    exporter = FileExporter(tmp_path, "chain 1/v3", "jsonl", run_tag="x")
    exporter.close()
    exporter.close()
    assert exporter.path.name == "chain_1_v3-x.jsonl"
