from pathlib import Path

import pytest

from postcode_finder.cli import parse_args, run_command


def _run_once(data_dir: Path, output: Path, request_id: str) -> None:
    args = parse_args(
        [
            "radius",
            "--postcode",
            "KT22 8DN",
            "--radius",
            "20",
            "--data-dir",
            str(data_dir),
            "--output",
            str(output),
            "--request-id",
            request_id,
        ]
    )
    assert run_command(args) == 0


@pytest.mark.regression
def test_export_is_byte_stable_for_same_inputs(tmp_path: Path):
    first = tmp_path / "first.csv"
    second = tmp_path / "second.csv"

    _run_once(Path("data"), first, "req-a")
    _run_once(Path("data"), second, "req-b")

    assert first.read_bytes() == second.read_bytes()


@pytest.mark.regression
def test_repo_sample_export_snapshot(tmp_path: Path):
    output = tmp_path / "snapshot.csv"
    _run_once(Path("data"), output, "req-snapshot")

    rows = output.read_text(encoding="utf-8").splitlines()
    assert rows[0] == "postcode,latitude,longitude,distance_km"
    assert [row.split(",")[0] for row in rows[1:]] == ["KT22 8DN", "KT22 7AA", "KT22 9AA", "KT1 1AA", "TW9 1AA"]
    assert rows[1].endswith(",0.0000")
