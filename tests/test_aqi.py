"""Tests for the EPA breakpoint-interpolation engine."""

import logging
import math
import warnings

import numpy as np
import pytest

from airwise.aqi import (
    EPA_TABLES,
    BreakpointTable,
    ComputedIndex,
    compute_overall_index,
    compute_sub_index,
)
from airwise.config import EPA_INDEX_BREAKPOINTS
from airwise.errors import BreakpointTableExhausted, InvalidReading
from airwise.readings import EPA_POLLUTANTS, PollutantKind, PollutantReading


def make_reading(**overrides):
    values = dict(co=0.0, no=0.0, no2=0.0, o3=0.0, so2=0.0, pm2_5=0.0, pm10=0.0, nh3=0.0)
    values.update(overrides)
    return PollutantReading(**values)


class TestBreakpointTable:
    """Tests for breakpoint table construction and interval selection."""

    def test_mismatched_lengths_rejected(self):
        """Concentration and index breakpoints must pair 1:1."""
        with pytest.raises(ValueError):
            BreakpointTable(PollutantKind.PM10, (0, 10, 20), (0, 50))

    def test_non_increasing_rejected(self):
        """Concentration breakpoints must be strictly increasing."""
        with pytest.raises(ValueError):
            BreakpointTable(PollutantKind.PM10, (0, 10, 10), (0, 50, 100))

    def test_single_breakpoint_rejected(self):
        with pytest.raises(ValueError):
            BreakpointTable(PollutantKind.PM10, (0,), (0,))

    def test_upper_breakpoint_belongs_to_lower_interval(self):
        """A value equal to an inner breakpoint selects the interval below it."""
        table = EPA_TABLES[PollutantKind.PM2_5]
        assert table.interval_for(12.0) == (0, False)
        assert table.interval_for(12.1) == (1, False)
        assert table.interval_for(0.0) == (0, False)

    def test_last_breakpoint_not_exhausted(self):
        table = EPA_TABLES[PollutantKind.PM2_5]
        assert table.interval_for(500.4) == (6, False)

    def test_above_table_clamps_to_last_interval(self):
        table = EPA_TABLES[PollutantKind.PM2_5]
        assert table.interval_for(600.0) == (6, True)

    def test_unit_conversions(self):
        """Ozone is halved, CO goes from µg/m³ to ppm, others pass through."""
        assert EPA_TABLES[PollutantKind.O3].convert(100.0) == 50.0
        assert EPA_TABLES[PollutantKind.CO].convert(9400.0) == 9.4
        assert EPA_TABLES[PollutantKind.PM10].convert(42.0) == 42.0

    def test_all_tables_share_index_breakpoints(self):
        for kind in EPA_POLLUTANTS:
            assert EPA_TABLES[kind].indices == tuple(EPA_INDEX_BREAKPOINTS)


class TestSubIndex:
    """Tests for single-pollutant sub-index interpolation."""

    def test_midpoint_of_first_interval(self):
        """PM2.5 of 6.0 is halfway to 12.0 and gives 25."""
        assert compute_sub_index(PollutantKind.PM2_5, 6.0).value == 25

    def test_pm25_boundary_exact(self):
        """PM2.5 = 12.0 is the top of the first band: exactly 50."""
        sub = compute_sub_index(PollutantKind.PM2_5, 12.0)
        assert sub.value == 50
        assert sub.raw == pytest.approx(50.0)

    def test_pm25_just_above_boundary(self):
        """PM2.5 = 12.1 lies in the second interval; the unrounded index exceeds 50."""
        sub = compute_sub_index(PollutantKind.PM2_5, 12.1)
        assert 50 < sub.raw <= 100
        assert sub.value == 50

    @pytest.mark.parametrize("kind", EPA_POLLUTANTS)
    def test_breakpoints_map_to_index_breakpoints(self, kind):
        """Every concentration breakpoint yields its index breakpoint exactly."""
        table = EPA_TABLES[kind]
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", BreakpointTableExhausted)
            for bp, idx in zip(table.concentrations, table.indices):
                assert compute_sub_index(kind, bp * table.divisor).value == idx

    @pytest.mark.parametrize("kind", EPA_POLLUTANTS)
    def test_monotonic(self, kind):
        """Increasing the concentration never decreases the sub-index."""
        table = EPA_TABLES[kind]
        top = table.concentrations[-1] * table.divisor * 1.2
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", BreakpointTableExhausted)
            values = [compute_sub_index(kind, c).value for c in np.linspace(0, top, 997)]
        assert all(b >= a for a, b in zip(values, values[1:]))

    def test_co_unit_conversion_boundary(self):
        """CO 9400 µg/m³ is 9.4 ppm, the Moderate/USG boundary: 100."""
        sub = compute_sub_index(PollutantKind.CO, 9400)
        assert sub.concentration == 9.4
        assert sub.value == 100

    def test_ozone_unit_conversion(self):
        """O3 108 µg/m³ is 54 ppb, the top of the Good band."""
        assert compute_sub_index(PollutantKind.O3, 108).value == 50

    def test_rounding_half_up(self):
        """Ties round up: 350.5 -> 351 and 349.5 -> 350."""
        up = compute_sub_index(PollutantKind.O3, 501)  # 250.5 ppb
        assert up.raw == 350.5
        assert up.value == 351

        down = compute_sub_index(PollutantKind.O3, 499)  # 249.5 ppb
        assert down.raw == 349.5
        assert down.value == 350

    def test_extrapolates_above_table(self):
        """Values above the last breakpoint extrapolate on the last interval."""
        with pytest.warns(BreakpointTableExhausted):
            sub = compute_sub_index(PollutantKind.PM2_5, 600.0)
        assert sub.exhausted
        assert sub.value == 566
        assert sub.value > 500

    def test_extrapolation_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="airwise.aqi"):
            with pytest.warns(BreakpointTableExhausted):
                compute_sub_index(PollutantKind.PM10, 1000)
        assert "exceeds the last breakpoint" in caplog.text

    @pytest.mark.parametrize("bad", [float("nan"), -1.0, None, "12", True])
    def test_invalid_concentration(self, bad):
        """NaN, negative and non-numeric values are rejected, never interpolated."""
        with pytest.raises(InvalidReading) as exc:
            compute_sub_index(PollutantKind.PM2_5, bad)
        assert exc.value.fields == ("pm2_5",)

    def test_warning_points_at_caller(self):
        with pytest.warns(BreakpointTableExhausted) as record:
            compute_sub_index(PollutantKind.PM10, 1000)
        assert record[0].filename == __file__

    def test_warning_can_be_silenced(self, caplog):
        """warn=False still logs the extrapolation."""
        with caplog.at_level(logging.WARNING, logger="airwise.aqi"):
            with warnings.catch_warnings():
                warnings.simplefilter("error", BreakpointTableExhausted)
                sub = compute_sub_index(PollutantKind.PM10, 1000, warn=False)
        assert sub.exhausted
        assert "exceeds the last breakpoint" in caplog.text

    @pytest.mark.parametrize("kind", ["pm2.5", "PM25", "ozone", "co"])
    def test_kind_aliases_accepted(self, kind):
        expected = PollutantKind.parse(kind)
        assert compute_sub_index(kind, 10.0).pollutant is expected

    @pytest.mark.parametrize("kind", [PollutantKind.NH3, "no", "benzene", None])
    def test_kind_without_table_rejected(self, kind):
        """Only the six regulated pollutants have breakpoint tables."""
        with pytest.raises(ValueError, match="pm2_5, pm10, o3, no2, so2, co") as exc:
            compute_sub_index(kind, 10.0)
        assert not isinstance(exc.value, InvalidReading)


class TestOverallIndex:
    """Tests for the overall index (maximum across pollutants)."""

    def test_all_zero_is_good(self):
        result = compute_overall_index(make_reading())
        assert result.value == 0
        assert result.label == "Good"
        assert result.color == "#00E400"

    def test_pm25_upper_moderate_edge(self):
        """PM2.5 35.4 with PM10 50 gives 100 (Moderate), driven by PM2.5."""
        result = compute_overall_index(make_reading(pm2_5=35.4, pm10=50))
        assert result.by_pollutant()[PollutantKind.PM2_5] == 100
        assert result.by_pollutant()[PollutantKind.PM10] == 46
        assert result.value == 100
        assert result.label == "Moderate"
        assert result.dominant is PollutantKind.PM2_5

    def test_co_drives_index(self):
        result = compute_overall_index(make_reading(co=9400))
        assert result.value == 100
        assert result.dominant is PollutantKind.CO

    def test_overall_is_maximum(self):
        reading = make_reading(pm2_5=20, pm10=200, o3=150, no2=120, so2=50, co=3000)
        result = compute_overall_index(reading)
        subs = [s.value for s in result.sub_indices]
        assert len(subs) == 6
        assert result.value == max(subs)
        assert [s.pollutant for s in result.sub_indices] == list(EPA_POLLUTANTS)

    def test_tie_reports_first_pollutant(self):
        """On a tie the first pollutant in evaluation order is dominant."""
        result = compute_overall_index(make_reading(pm10=54, no2=53))
        assert result.value == 50
        assert result.dominant is PollutantKind.PM10

    def test_nh3_and_no_ignored(self):
        """Ammonia and nitric oxide do not contribute to the EPA index."""
        result = compute_overall_index(make_reading(nh3=10000, no=10000))
        assert result.value == 0

    def test_idempotent(self):
        reading = make_reading(pm2_5=47.3, o3=180.2, co=5230)
        first = compute_overall_index(reading)
        second = compute_overall_index(reading)
        assert first == second
        assert isinstance(first, ComputedIndex)
        assert isinstance(first.value, int)

    def test_hazardous_extrapolated(self):
        with pytest.warns(BreakpointTableExhausted):
            result = compute_overall_index(make_reading(pm2_5=600))
        assert result.value == 566
        assert result.label == "Hazardous"
        assert result.exhausted_pollutants == (PollutantKind.PM2_5,)

    def test_accepts_component_mapping(self):
        components = {"co": 201.94, "no": 0.0, "no2": 0.77, "o3": 68.66, "so2": 0.64,
                      "pm2_5": 0.5, "pm10": 0.54, "nh3": 0.12}
        result = compute_overall_index(components)
        assert result.value == compute_overall_index(PollutantReading.from_components(components)).value
        # O3 68.66 µg/m³ -> 34.33 ppb -> 50/54 * 34.33
        assert result.value == 32
        assert result.dominant is PollutantKind.O3

    def test_nan_rejected_before_interpolation(self):
        with pytest.raises(InvalidReading):
            compute_overall_index({"co": 0, "no": 0, "no2": 0, "o3": math.nan,
                                   "so2": 0, "pm2_5": 0, "pm10": 0, "nh3": 0})

    def test_missing_pollutant_rejected(self):
        with pytest.raises(InvalidReading) as exc:
            compute_overall_index({"pm2_5": 10.0})
        assert "co" in exc.value.fields

    def test_single_warning_per_reading(self):
        """Several extrapolated pollutants give one warning, raised at the caller."""
        with pytest.warns(BreakpointTableExhausted) as record:
            result = compute_overall_index(make_reading(pm2_5=600, pm10=700))
        exhausted = [w for w in record if issubclass(w.category, BreakpointTableExhausted)]
        assert len(exhausted) == 1
        assert exhausted[0].filename == __file__
        assert "pm2_5, pm10" in str(exhausted[0].message)
        assert result.exhausted_pollutants == (PollutantKind.PM2_5, PollutantKind.PM10)

    def test_warn_false(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", BreakpointTableExhausted)
            result = compute_overall_index(make_reading(pm2_5=600), warn=False)
        assert result.value == 566
