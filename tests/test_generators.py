from datetime import datetime, timezone

import pytest

from eadv_mocker.synthetic.generator import (
    DateRange,
    MockerOptions,
    generate_eadv_rows,
    generate_entity_ids,
    generate_rout_tables,
    resolve_options,
)
from eadv_mocker.synthetic.random_source import SeededRandom
from eadv_mocker.synthetic.values import (
    CLINICAL_VALUE_GENERATORS,
    create_discrete_generator,
    create_nullable_generator,
    create_range_generator,
    default_value_generator,
)

WINDOW = DateRange(start="2024-01-01", end="2024-12-31")


def _options(**kwargs) -> MockerOptions:
    kwargs.setdefault("date_range", WINDOW)
    kwargs.setdefault("seed", 1)
    return MockerOptions(**kwargs)


class TestEntityIds:
    def test_consecutive_ids(self) -> None:
        assert generate_entity_ids(3, 2000) == [2000, 2001, 2002]

    def test_zero_count(self) -> None:
        assert generate_entity_ids(0, 1001) == []


class TestEadvRows:
    def test_row_count_arithmetic(self) -> None:
        opts = resolve_options(_options(entity_count=2, observations_per_entity=4))
        entities = generate_entity_ids(2, 1001)
        rows = generate_eadv_rows(["lab_bld_egfr"], entities, opts, SeededRandom(1))

        assert len(rows) == 8
        assert [row.eid for row in rows] == [1001] * 4 + [1002] * 4
        assert all(row.att == "lab_bld_egfr" for row in rows)

    def test_dates_descending_within_entity_attribute(self) -> None:
        opts = resolve_options(_options(observations_per_entity=5))
        rows = generate_eadv_rows(["obs_hr"], [1], opts, SeededRandom(3))
        dts = [row.dt for row in rows]
        assert dts == sorted(dts, reverse=True)

    def test_wildcards_expanded_once_for_all_entities(self) -> None:
        opts = resolve_options(_options(observations_per_entity=1))
        rows = generate_eadv_rows(["icd_c18%"], [1, 2, 3], opts, SeededRandom(12345))

        attributes = {row.att for row in rows}
        assert attributes == {"icd_c18rh"}
        assert len(rows) == 3

    def test_attribute_override_receives_shared_rng(self) -> None:
        seen = []

        def capture(rng: SeededRandom) -> int:
            seen.append(rng)
            return 42

        opts = resolve_options(
            _options(observations_per_entity=3, value_generators={"lab_bld_egfr": capture})
        )
        rng = SeededRandom(9)
        rows = generate_eadv_rows(["lab_bld_egfr"], [1], opts, rng)

        assert [row.val for row in rows] == [42, 42, 42]
        assert all(item is rng for item in seen)

    def test_pattern_override_applies_to_expanded_attribute(self) -> None:
        opts = resolve_options(
            _options(observations_per_entity=2, value_generators={"icd_%": lambda rng: "dx"})
        )
        rows = generate_eadv_rows(["icd_%"], [1], opts, SeededRandom(12345))
        assert [row.val for row in rows] == ["dx", "dx"]
        assert rows[0].att == "icd_rh"

    def test_default_generator_used_otherwise(self) -> None:
        opts = resolve_options(_options(observations_per_entity=10))
        rows = generate_eadv_rows(["unknown_att"], [1], opts, SeededRandom(5))
        assert all(0 <= row.val <= 100 for row in rows)

    def test_dates_formatted_per_options(self) -> None:
        opts = resolve_options(_options(observations_per_entity=2, date_format="oracle"))
        rows = generate_eadv_rows(["obs_hr"], [1], opts, SeededRandom(5))
        for row in rows:
            day, month, year = row.dt.split("-")
            assert len(day) == 2 and month.isupper() and year == "2024"

    def test_zero_observations_yield_no_rows(self) -> None:
        opts = resolve_options(_options(observations_per_entity=0))
        assert generate_eadv_rows(["obs_hr"], [1, 2], opts, SeededRandom(1)) == []

    def test_same_seed_same_rows(self) -> None:
        opts = resolve_options(_options(date_distribution="clustered"))
        rows1 = generate_eadv_rows(["a", "b_%"], [1, 2], opts, SeededRandom(77))
        rows2 = generate_eadv_rows(["a", "b_%"], [1, 2], opts, SeededRandom(77))
        assert rows1 == rows2


class TestRoutTables:
    def test_one_row_per_entity_with_every_variable(self) -> None:
        opts = resolve_options(_options())
        tables = generate_rout_tables(
            {"rout_ckd": ("ckd", "ckd_stage")}, [1, 2, 3], opts, SeededRandom(1)
        )
        rows = tables["rout_ckd"]
        assert len(rows) == 3
        assert [row.eid for row in rows] == [1, 2, 3]
        for row in rows:
            assert set(row.values) == {"ckd", "ckd_stage"}
            assert row.values["ckd"] in (0, 1)

    def test_default_flag_draw(self) -> None:
        opts = resolve_options(_options())
        reference = SeededRandom(12345)
        expected = [1 if reference.random() > 0.5 else 0 for _ in range(4)]
        tables = generate_rout_tables({"rout_dm": ["dm"]}, [1, 2, 3, 4], opts, SeededRandom(12345))
        assert [row.values["dm"] for row in tables["rout_dm"]] == expected

    def test_variable_override(self) -> None:
        opts = resolve_options(
            _options(bind_table_values={"rout_ckd": {"ckd_stage": lambda rng: "3a"}})
        )
        tables = generate_rout_tables(
            {"rout_ckd": ["ckd", "ckd_stage"]}, [7], opts, SeededRandom(1)
        )
        assert tables["rout_ckd"][0].values["ckd_stage"] == "3a"
        assert tables["rout_ckd"][0].as_dict()["eid"] == 7


class TestOptions:
    def test_defaults(self) -> None:
        now = datetime(2025, 1, 1)
        opts = resolve_options(MockerOptions(seed=5), now=now)
        assert opts.entity_count == 3
        assert opts.entity_id_start == 1001
        assert opts.observations_per_entity == 3
        assert opts.date_format.value == "iso"
        assert opts.date_distribution.value == "uniform"
        assert opts.include_mock_bind_tables is True
        assert opts.default_value_generator is default_value_generator
        assert opts.end == now
        assert (opts.end - opts.start).days == 365

    def test_seed_defaults_to_wall_clock(self, monkeypatch) -> None:
        monkeypatch.setattr(
            "eadv_mocker.synthetic.generator.time.time", lambda: 1700000000.5
        )
        assert resolve_options(MockerOptions()).seed == 1700000000500

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"entity_count": -1}, "entity_count"),
            ({"observations_per_entity": -2}, "observations_per_entity"),
            ({"date_format": "excel"}, "date_format"),
            ({"date_distribution": "weekly"}, "date_distribution"),
        ],
    )
    def test_invalid_options(self, kwargs, message) -> None:
        with pytest.raises(ValueError, match=message):
            MockerOptions(**kwargs)

    def test_date_range_parses_and_validates(self) -> None:
        assert WINDOW.start == datetime(2024, 1, 1)
        with pytest.raises(ValueError, match="start must be <= end"):
            DateRange(start="2024-12-31", end="2024-01-01")

    def test_date_range_reads_naive_end_as_utc_when_other_is_aware(self) -> None:
        window = DateRange(start="2024-01-01", end="2024-12-31T00:00:00Z")
        assert window.start == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert window.end == datetime(2024, 12, 31, tzinfo=timezone.utc)

        with pytest.raises(ValueError, match="start must be <= end"):
            DateRange(start="2025-01-01T00:00:00+00:00", end="2024-12-31")

    def test_mixed_timezone_window_generates_rows(self) -> None:
        window = DateRange(start="2024-01-01", end="2024-12-31T00:00:00Z")
        opts = resolve_options(_options(date_range=window, observations_per_entity=4))
        rows = generate_eadv_rows(["obs_hr"], [1], opts, SeededRandom(2))
        assert all("2024-01-01" <= row.dt <= "2024-12-31" for row in rows)


class TestValueGenerators:
    def test_range_generator_integers(self) -> None:
        gen = create_range_generator(15, 120)
        rng = SeededRandom(1)
        values = [gen(rng) for _ in range(200)]
        assert all(isinstance(v, int) and 15 <= v <= 120 for v in values)

    def test_range_generator_floats(self) -> None:
        gen = create_range_generator(2.5, 15, 1)
        rng = SeededRandom(1)
        assert all(2.5 <= gen(rng) <= 15 for _ in range(200))

    def test_range_generator_rejects_inverted_bounds(self) -> None:
        with pytest.raises(ValueError):
            create_range_generator(10, 1)

    def test_integer_generator_rounds_fractional_bounds_inwards(self) -> None:
        gen = create_range_generator(2.5, 15)
        rng = SeededRandom(12345)
        values = [gen(rng) for _ in range(500)]
        assert all(isinstance(v, int) and 3 <= v <= 15 for v in values)
        assert min(values) == 3

    def test_integer_generator_requires_an_integer_in_range(self) -> None:
        with pytest.raises(ValueError, match="no integer"):
            create_range_generator(2.3, 2.7)

    def test_discrete_generator(self) -> None:
        gen = create_discrete_generator(["pos", "neg", None])
        rng = SeededRandom(2)
        assert {gen(rng) for _ in range(100)} == {"pos", "neg", None}

    def test_discrete_generator_requires_values(self) -> None:
        with pytest.raises(ValueError):
            create_discrete_generator([])

    def test_nullable_generator(self) -> None:
        always_null = create_nullable_generator(1.0, lambda rng: 5)
        never_null = create_nullable_generator(0.0, lambda rng: 5)
        rng = SeededRandom(4)
        assert always_null(rng) is None
        assert never_null(rng) == 5

    def test_nullable_generator_validates_probability(self) -> None:
        with pytest.raises(ValueError):
            create_nullable_generator(1.5, default_value_generator)

    def test_clinical_generators_in_range(self) -> None:
        rng = SeededRandom(10)
        for _ in range(50):
            assert 15 <= CLINICAL_VALUE_GENERATORS["lab_bld_egfr"](rng) <= 120
            assert 4 <= CLINICAL_VALUE_GENERATORS["lab_bld_hba1c"](rng) <= 12

    def test_generators_are_reproducible(self) -> None:
        gen = CLINICAL_VALUE_GENERATORS["lab_bld_potassium"]
        rng1, rng2 = SeededRandom(8), SeededRandom(8)
        assert [gen(rng1) for _ in range(20)] == [gen(rng2) for _ in range(20)]
