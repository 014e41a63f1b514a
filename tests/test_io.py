from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from ebl_profile.config import ColumnsConfig, ConfigError
from ebl_profile.io.read import load_rows
from ebl_profile.io.schema import configured_source_columns, require_columns, rows_to_frame


def test_load_rows_keeps_raw_strings(tmp_path: Path) -> None:
    csv_path = tmp_path / "cases.csv"
    csv_path.write_bytes("\ufeffoptype,intraop_ebl,sex\nColorectal,0100,NA\nStomach,,M\n".encode())

    rows = load_rows(csv_path)

    assert rows.columns.tolist() == ["optype", "intraop_ebl", "sex"]
    assert rows["intraop_ebl"].tolist() == ["0100", ""]
    assert rows["sex"].tolist() == ["NA", "M"]


def test_configured_source_columns_skips_unset_secondary_fields() -> None:
    columns = ColumnsConfig(secondary_numeric=None)

    assert configured_source_columns(columns) == {
        "optype": "category",
        "intraop_ebl": "value",
        "sex": "secondary_category",
    }


def test_require_columns_raises_for_missing_configured_columns() -> None:
    frame = pd.DataFrame({"optype": ["A"], "intraop_ebl": ["1"], "age": ["50"]})

    with pytest.raises(ConfigError, match="sex"):
        require_columns(frame, ColumnsConfig())
    assert require_columns(frame, ColumnsConfig(secondary_category=None)) is frame


def test_rows_to_frame_copies_frames_and_builds_from_mappings() -> None:
    frame = pd.DataFrame({"a": ["1"]})

    copied = rows_to_frame(frame)
    copied.loc[0, "a"] = "2"

    assert frame.loc[0, "a"] == "1"
    assert rows_to_frame([{"a": "1"}, {"b": "2"}]).columns.tolist() == ["a", "b"]
    assert rows_to_frame([]).empty
