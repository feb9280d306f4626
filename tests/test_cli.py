import json
from pathlib import Path

import pytest

from recon_checker.cli import main

DATA_DIR = Path(__file__).parent / "data"


def base_args(*extra: str) -> list[str]:
    return [
        "--system",
        str(DATA_DIR / "system.csv"),
        "--bank",
        str(DATA_DIR / "bank_bca.csv"),
        "--bank",
        str(DATA_DIR / "bank_bni.csv"),
        "--start",
        "2024-02-01",
        "--end",
        "2024-02-28",
        *extra,
    ]


def test_json_report(capsys):
    assert main(base_args()) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["totalProcessed"] == 15
    assert payload["totalMatched"] == 5
    assert payload["totalUnmatched"] == 4
    assert payload["totalAmountDiscrepancyMinor"] == 500
    assert sorted(payload["bankMissingInSystem"]) == ["bank_bca", "bank_bni"]
    assert payload["notes"]


def test_text_report(capsys):
    assert main(base_args("--format", "text")) == 0

    out = capsys.readouterr().out
    assert out.startswith("Total processed: 15\n")
    assert "  [bank_bni]" in out


def test_output_file(tmp_path: Path, capsys):
    target = tmp_path / "summary.json"

    assert main(base_args("--output", str(target))) == 0

    assert capsys.readouterr().out == ""
    assert json.loads(target.read_text(encoding="utf-8"))["totalMatched"] == 5


def test_end_before_start_is_usage_error():
    args = base_args()
    args[args.index("--end") + 1] = "2024-01-01"
    with pytest.raises(SystemExit) as excinfo:
        main(args)
    assert excinfo.value.code == 2


def test_missing_bank_argument_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        main(["--system", "s.csv", "--start", "2024-01-01", "--end", "2024-01-02"])
    assert excinfo.value.code == 2


def test_invalid_date_is_usage_error():
    args = base_args()
    args[args.index("--start") + 1] = "01/02/2024"
    with pytest.raises(SystemExit) as excinfo:
        main(args)
    assert excinfo.value.code == 2


def test_invalid_row_fails_loudly(tmp_path: Path, capsys):
    bank = tmp_path / "bank_bad.csv"
    bank.write_text("unique_identifier,amount,date\nX,12.3x,2024-02-01\n")
    args = base_args()
    args[args.index("--bank") + 1] = str(bank)

    assert main(args) == 1
    assert capsys.readouterr().out == ""


def test_undecodable_bank_file_fails(tmp_path: Path, capsys):
    bank = tmp_path / "bank_latin1.csv"
    bank.write_bytes(b"unique_identifier,amount,date\nX\xff\xfe,1.00,2024-02-01\n")
    args = base_args()
    args[args.index("--bank") + 1] = str(bank)

    assert main(args) == 1
    assert capsys.readouterr().out == ""


def test_missing_file_fails(tmp_path: Path):
    args = base_args()
    args[args.index("--system") + 1] = str(tmp_path / "nope.csv")

    assert main(args) == 1
