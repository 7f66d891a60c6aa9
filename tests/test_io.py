"""Tests for the CSV/JSON readers and writers."""

import json
import logging
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from gr4j import Parameters, load_forcing, load_parameters, save_flow

REFERENCE_PARAMETERS = {
    "production_store_capacity": 300.0,
    "exchange_coefficient": 2.5,
    "routing_store_capacity": 70.0,
    "days": 1.5,
    "production_store_content": 180.0,
    "routing_store_content": 49.0,
}


@pytest.fixture
def forcing_csv(tmp_path: Path) -> Path:
    path = tmp_path / "forcing.csv"
    path.write_text(
        "date,rainfall,pet\n"
        "2020-01-01,14.1,0.46\n"
        "2020-01-02,3.7,0.46\n"
        "2020-01-03,7.1,0.47\n"
    )
    return path


@pytest.fixture
def parameters_json(tmp_path: Path) -> Path:
    path = tmp_path / "parameters.json"
    path.write_text(json.dumps(REFERENCE_PARAMETERS))
    return path


class TestLoadForcing:
    """Tests for load_forcing."""

    def test_reads_columns(self, forcing_csv: Path) -> None:
        forcing = load_forcing(forcing_csv)

        assert len(forcing) == 3
        np.testing.assert_allclose(forcing.precip, [14.1, 3.7, 7.1])
        np.testing.assert_allclose(forcing.pet, [0.46, 0.46, 0.47])
        assert forcing.time[0] == np.datetime64("2020-01-01")

    def test_ignores_column_order(self, tmp_path: Path) -> None:
        path = tmp_path / "forcing.csv"
        path.write_text("pet,date,rainfall\n0.5,2020-01-01,2.0\n")

        forcing = load_forcing(path)

        assert forcing.precip[0] == 2.0
        assert forcing.pet[0] == 0.5

    def test_rejects_missing_column(self, tmp_path: Path) -> None:
        path = tmp_path / "forcing.csv"
        path.write_text("date,rainfall\n2020-01-01,2.0\n")

        with pytest.raises(ValueError, match="missing required columns"):
            load_forcing(path)

    def test_rejects_missing_values(self, tmp_path: Path) -> None:
        """Gaps are not filled: an empty cell is NaN and is rejected."""
        path = tmp_path / "forcing.csv"
        path.write_text("date,rainfall,pet\n2020-01-01,,0.5\n")

        with pytest.raises(ValueError, match="NaN"):
            load_forcing(path)


class TestLoadParameters:
    """Tests for load_parameters."""

    def test_reads_parameters(self, parameters_json: Path) -> None:
        params = load_parameters(parameters_json)

        assert params == Parameters(**REFERENCE_PARAMETERS)

    def test_accepts_integers(self, tmp_path: Path) -> None:
        path = tmp_path / "parameters.json"
        path.write_text(json.dumps({**REFERENCE_PARAMETERS, "production_store_capacity": 300}))

        params = load_parameters(path)

        assert params.production_store_capacity == 300.0
        assert isinstance(params.production_store_capacity, float)

    def test_rejects_missing_parameter(self, tmp_path: Path) -> None:
        data = dict(REFERENCE_PARAMETERS)
        del data["days"]
        path = tmp_path / "parameters.json"
        path.write_text(json.dumps(data))

        with pytest.raises(ValueError, match="missing parameters \\['days'\\]"):
            load_parameters(path)

    @pytest.mark.parametrize("value", ["300", None, True])
    def test_rejects_non_numeric(self, tmp_path: Path, value: object) -> None:
        path = tmp_path / "parameters.json"
        path.write_text(json.dumps({**REFERENCE_PARAMETERS, "production_store_capacity": value}))

        with pytest.raises(ValueError, match="must be a number"):
            load_parameters(path)

    def test_rejects_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "parameters.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(ValueError, match="expected a JSON object"):
            load_parameters(path)

    def test_rejects_invalid_configuration(self, tmp_path: Path) -> None:
        path = tmp_path / "parameters.json"
        path.write_text(json.dumps({**REFERENCE_PARAMETERS, "days": 0.0}))

        with pytest.raises(ValueError, match="days must be positive"):
            load_parameters(path)

    def test_rejects_infinite_days(self, tmp_path: Path) -> None:
        """JSON ``Infinity`` parses as a float but is not a usable time base."""
        path = tmp_path / "parameters.json"
        path.write_text(json.dumps({**REFERENCE_PARAMETERS, "days": float("inf")}))

        with pytest.raises(ValueError, match="days must be finite"):
            load_parameters(path)

    def test_warns_on_unknown_keys(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = tmp_path / "parameters.json"
        path.write_text(json.dumps({**REFERENCE_PARAMETERS, "x5": 0.1}))

        with caplog.at_level(logging.WARNING):
            load_parameters(path)

        assert "x5" in caplog.text


class TestSaveFlow:
    """Tests for save_flow."""

    def test_writes_date_and_flow(self, tmp_path: Path) -> None:
        path = tmp_path / "flow.csv"
        time = pd.date_range("2020-01-01", periods=2, freq="D").values

        save_flow(time, np.array([4.018, 4.574]), path)

        lines = path.read_text().splitlines()
        assert lines[0] == "date,flow"
        assert lines[1].startswith("2020-01-01,4.018")
        assert lines[2].startswith("2020-01-02,4.574")

    def test_round_trips_through_pandas(self, tmp_path: Path) -> None:
        path = tmp_path / "flow.csv"
        flow = np.array([1.0, 2.5, 0.0])

        save_flow(np.array(["2021-06-01", "2021-06-02", "2021-06-03"]), flow, path)

        df = pd.read_csv(path)
        np.testing.assert_allclose(df["flow"], flow)
        assert list(df["date"]) == ["2021-06-01", "2021-06-02", "2021-06-03"]

    def test_rejects_length_mismatch(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="does not match"):
            save_flow(pd.date_range("2020-01-01", periods=2).values, np.zeros(3), tmp_path / "flow.csv")
