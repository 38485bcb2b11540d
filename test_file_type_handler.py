import pandas as pd
import pytest

from file_type_handler import FileTypeHandler


def test_csv_loads_as_one_sheet_named_after_the_file(tmp_path):
    path = tmp_path / "bills.csv"
    path.write_text("name,due,cost\nrent,2024-06-01,1200\nwater,2024-06-15,40.5\n", encoding="utf-8")

    sheets = FileTypeHandler(str(path)).load()

    assert list(sheets) == ["bills"]
    df = sheets["bills"]
    assert pd.api.types.is_datetime64_any_dtype(df["due"])
    assert not pd.api.types.is_datetime64_any_dtype(df["name"])
    assert df["cost"].tolist() == [1200.0, 40.5]


def test_mixed_text_columns_stay_text(tmp_path):
    path = tmp_path / "notes.tsv"
    path.write_text("when\tnote\n2024-06-01\thi\nsoon\tthere\n", encoding="utf-8")

    df = FileTypeHandler(str(path)).load()["notes"]

    assert df["when"].tolist() == ["2024-06-01", "soon"]


def test_json_records(tmp_path):
    path = tmp_path / "items.json"
    path.write_text('[{"name": "a", "cost": 1.5}, {"name": "b", "cost": 2.0}]', encoding="utf-8")

    df = FileTypeHandler(str(path)).load()["items"]

    assert df["name"].tolist() == ["a", "b"]


def test_missing_or_empty_file_falls_back_to_the_sample(tmp_path):
    missing = FileTypeHandler(str(tmp_path / "nope.csv")).load()
    assert list(missing) == ["nope"]
    assert len(missing["nope"]) > 0

    empty = tmp_path / "empty.csv"
    empty.write_text("", encoding="utf-8")
    assert list(FileTypeHandler(str(empty)).load()) == ["empty"]


def test_sheet_name_does_not_change_when_the_file_appears(tmp_path):
    path = tmp_path / "bills.csv"
    handler = FileTypeHandler(str(path))
    before = list(handler.load())

    path.write_text("name,cost\nrent,1200\n", encoding="utf-8")
    after = list(handler.load())

    assert before == after == ["bills"]


def test_unsupported_extension_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        FileTypeHandler(str(tmp_path / "data.h5"))
    assert exc.value.code == 1
    assert "Unsupported file type" in capsys.readouterr().err
