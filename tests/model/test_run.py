"""Integration tests for gr4j.model.run module.

Tests the functional step() and the Numba-backed run() which execute the
complete GR4J model for single timesteps and timeseries respectively.
"""

import numpy as np
import pandas as pd
import pytest

from gr4j import GR4J, ForcingData, GR4JFluxes, ModelOutput, Parameters, State
from gr4j.model.run import _N_FLUXES, _step_numba, run, step
from gr4j.model.unit_hydrographs import compute_uh_ordinates, convolve_uh

EXPECTED_FLUX_KEYS = {
    "pet",
    "precip",
    "production_store",
    "net_rainfall",
    "storage_infiltration",
    "actual_et",
    "percolation",
    "effective_rainfall",
    "q9",
    "q1",
    "routing_store",
    "exchange",
    "qr",
    "qd",
    "streamflow",
}


@pytest.fixture
def reference_params() -> Parameters:
    """Parameters of the published GR4J worked example."""
    return Parameters(
        production_store_capacity=300.0,
        exchange_coefficient=2.5,
        routing_store_capacity=70.0,
        days=1.5,
        production_store_content=180.0,
        routing_store_content=49.0,
    )


@pytest.fixture
def reference_forcing() -> ForcingData:
    """Five days of worked-example forcing."""
    return ForcingData(
        time=pd.date_range("2020-01-01", periods=5, freq="D").values,
        precip=np.array([14.1, 3.7, 7.1, 9.3, 7.1]),
        pet=np.array([0.46, 0.46, 0.47, 0.47, 0.48]),
    )


@pytest.fixture
def uh_ordinates(reference_params: Parameters) -> tuple[np.ndarray, np.ndarray]:
    return compute_uh_ordinates(reference_params.days)


class TestStepNumba:
    def test_buffers_follow_convolve_uh(self) -> None:
        """The in-place kernel convolution matches convolve_uh day by day."""
        params = Parameters(300.0, 2.5, 70.0, 3.4, 180.0, 49.0)
        uh1_ord, uh2_ord = compute_uh_ordinates(params.days)
        n1 = len(uh1_ord)
        state_arr = np.asarray(State.initialize(params))
        params_arr = np.asarray(params)
        output = np.zeros(_N_FLUXES)
        uh1_states = np.zeros(n1)
        uh2_states = np.zeros(len(uh2_ord))

        for precip in [14.1, 0.0, 7.1, 22.0, 0.0, 0.0, 3.0]:
            _step_numba(state_arr, params_arr, precip, 0.5, uh1_ord, uh2_ord, output)
            effective_rainfall = output[7]
            uh1_states, uh1_output = convolve_uh(uh1_states, effective_rainfall, uh1_ord)
            uh2_states, uh2_output = convolve_uh(uh2_states, effective_rainfall, uh2_ord)

            np.testing.assert_allclose(state_arr[2 : 2 + n1], uh1_states, rtol=1e-12)
            np.testing.assert_allclose(state_arr[2 + n1 :], uh2_states, rtol=1e-12)
            assert output[8] == pytest.approx(0.9 * uh1_output, rel=1e-12)
            assert output[9] == pytest.approx(0.1 * uh2_output, rel=1e-12)


class TestStep:
    """Tests for the step() function - single timestep execution."""

    def test_returns_new_state_and_fluxes(
        self, reference_params: Parameters, uh_ordinates: tuple[np.ndarray, np.ndarray]
    ) -> None:
        uh1_ord, uh2_ord = uh_ordinates

        new_state, fluxes = step(State.initialize(reference_params), reference_params, 14.1, 0.46, uh1_ord, uh2_ord)

        assert isinstance(new_state, State)
        assert set(fluxes) == EXPECTED_FLUX_KEYS

    def test_reference_first_day(
        self, reference_params: Parameters, uh_ordinates: tuple[np.ndarray, np.ndarray]
    ) -> None:
        """First day reproduces the worked example intermediate values."""
        uh1_ord, uh2_ord = uh_ordinates

        _, fluxes = step(State.initialize(reference_params), reference_params, 14.1, 0.46, uh1_ord, uh2_ord)

        assert fluxes["effective_rainfall"] == pytest.approx(5.4334, abs=1e-3)
        assert fluxes["q9"] == pytest.approx(1.7746, abs=1e-3)
        assert fluxes["exchange"] == pytest.approx(0.717, abs=1e-3)
        assert fluxes["qr"] == pytest.approx(3.202, abs=1e-3)
        assert fluxes["streamflow"] == pytest.approx(4.018, abs=1e-3)

    def test_does_not_mutate_input_state(
        self, reference_params: Parameters, uh_ordinates: tuple[np.ndarray, np.ndarray]
    ) -> None:
        uh1_ord, uh2_ord = uh_ordinates
        state = State.initialize(reference_params)

        step(state, reference_params, 14.1, 0.46, uh1_ord, uh2_ord)

        assert state.production_store == 180.0
        assert state.routing_store == 49.0
        np.testing.assert_array_equal(state.uh1_states, np.zeros(2))

    def test_streamflow_is_sum_of_branches(
        self, reference_params: Parameters, uh_ordinates: tuple[np.ndarray, np.ndarray]
    ) -> None:
        uh1_ord, uh2_ord = uh_ordinates

        _, fluxes = step(State.initialize(reference_params), reference_params, 30.0, 1.0, uh1_ord, uh2_ord)

        assert fluxes["streamflow"] == pytest.approx(fluxes["qr"] + fluxes["qd"])

    def test_dry_day_fluxes(self, reference_params: Parameters, uh_ordinates: tuple[np.ndarray, np.ndarray]) -> None:
        """With PET above rainfall there is no net rainfall nor infiltration."""
        uh1_ord, uh2_ord = uh_ordinates

        _, fluxes = step(State.initialize(reference_params), reference_params, 0.0, 4.0, uh1_ord, uh2_ord)

        assert fluxes["net_rainfall"] == 0.0
        assert fluxes["storage_infiltration"] == 0.0
        assert fluxes["effective_rainfall"] == pytest.approx(fluxes["percolation"])
        assert fluxes["actual_et"] > 0.0


class TestRun:
    """Tests for the run() function - timeseries execution."""

    def test_reference_streamflow(self, reference_params: Parameters, reference_forcing: ForcingData) -> None:
        result = run(reference_params, reference_forcing)

        np.testing.assert_allclose(result.streamflow, [4.018, 4.574, 4.240, 4.397, 4.721], atol=1e-3)

    def test_returns_model_output(self, reference_params: Parameters, reference_forcing: ForcingData) -> None:
        result = run(reference_params, reference_forcing)

        assert isinstance(result, ModelOutput)
        assert isinstance(result.fluxes, GR4JFluxes)
        assert len(result) == 5
        np.testing.assert_array_equal(result.time, reference_forcing.time)

    def test_matches_object_model(self, reference_params: Parameters) -> None:
        """The compiled kernel and the store objects produce the same flows."""
        rng = np.random.default_rng(123)
        n = 400
        forcing = ForcingData(
            time=pd.date_range("2000-01-01", periods=n, freq="D").values,
            precip=rng.exponential(4.0, n),
            pet=rng.uniform(0.0, 6.0, n),
        )

        result = run(reference_params, forcing)
        expected = GR4J(reference_params).run(forcing.precip, forcing.pet)

        np.testing.assert_allclose(result.streamflow, expected, rtol=1e-10, atol=1e-12)

    def test_matches_chained_steps(self, reference_params: Parameters, reference_forcing: ForcingData) -> None:
        """Chaining step() reproduces every flux of run()."""
        uh1_ord, uh2_ord = compute_uh_ordinates(reference_params.days)
        state = State.initialize(reference_params)
        result = run(reference_params, reference_forcing).fluxes.to_dict()

        for idx in range(len(reference_forcing)):
            state, fluxes = step(
                state,
                reference_params,
                float(reference_forcing.precip[idx]),
                float(reference_forcing.pet[idx]),
                uh1_ord,
                uh2_ord,
            )
            for key, value in fluxes.items():
                assert result[key][idx] == pytest.approx(value, rel=1e-10, abs=1e-12), key

    def test_resumes_from_initial_state(self, reference_params: Parameters, reference_forcing: ForcingData) -> None:
        """Running from a state reached mid-series continues the same trajectory."""
        uh1_ord, uh2_ord = compute_uh_ordinates(reference_params.days)
        state = State.initialize(reference_params)
        for idx in range(2):
            state, _ = step(
                state,
                reference_params,
                float(reference_forcing.precip[idx]),
                float(reference_forcing.pet[idx]),
                uh1_ord,
                uh2_ord,
            )

        tail = ForcingData(
            time=reference_forcing.time[2:],
            precip=reference_forcing.precip[2:],
            pet=reference_forcing.pet[2:],
        )
        result = run(reference_params, tail, initial_state=state)

        np.testing.assert_allclose(result.streamflow, [4.240, 4.397, 4.721], atol=1e-3)

    def test_does_not_mutate_initial_state(
        self, reference_params: Parameters, reference_forcing: ForcingData
    ) -> None:
        state = State.initialize(reference_params)

        run(reference_params, reference_forcing, initial_state=state)

        assert state.production_store == 180.0
        np.testing.assert_array_equal(state.uh2_states, np.zeros(3))

    def test_rejects_mismatched_initial_state(
        self, reference_params: Parameters, reference_forcing: ForcingData
    ) -> None:
        state = State(production_store=100.0, routing_store=10.0, uh1_states=np.zeros(20), uh2_states=np.zeros(40))

        with pytest.raises(ValueError, match="initial_state buffers"):
            run(reference_params, reference_forcing, initial_state=state)

    def test_empty_forcing(self, reference_params: Parameters) -> None:
        forcing = ForcingData(time=np.array([], dtype="datetime64[ns]"), precip=np.array([]), pet=np.array([]))

        result = run(reference_params, forcing)

        assert len(result) == 0
        assert result.streamflow.shape == (0,)

    def test_to_dataframe(self, reference_params: Parameters, reference_forcing: ForcingData) -> None:
        df = run(reference_params, reference_forcing).to_dataframe()

        assert isinstance(df, pd.DataFrame)
        assert set(df.columns) == EXPECTED_FLUX_KEYS
        assert df.index.name == "time"
        assert len(df) == 5
