"""
Tests for filters: AND-combined sidebar criteria and the dehumidifier toggle.
"""
from filters import filter_dehumidifier_unused, filter_records, matches_criteria
from models import ControlState, FilterCriteria, KojiRecord


class TestDefaults:
    def test_default_criteria_pass_everything(self, sample_records):
        assert filter_records(sample_records, FilterCriteria()) == sample_records

    def test_empty_sheet_set_is_identity(self, sample_records):
        criteria = FilterCriteria(sheets=frozenset())
        assert filter_records(sample_records, criteria) == sample_records

    def test_input_not_modified(self, sample_records):
        before = list(sample_records)
        filter_records(sample_records, FilterCriteria(variety='山田錦'))
        assert sample_records == before


class TestExactMatch:
    def test_variety(self, sample_records):
        result = filter_records(sample_records, FilterCriteria(variety='山田錦'))
        assert {r.variety for r in result} == {'山田錦'}
        assert len(result) == 2

    def test_origin(self, sample_records):
        result = filter_records(sample_records, FilterCriteria(origin='岡山'))
        assert [r.machine for r in result] == ['2号機']

    def test_unknown_value_matches_nothing(self, sample_records):
        assert filter_records(sample_records, FilterCriteria(variety='五百万石')) == []


class TestPolishingRatio:
    def test_range_is_inclusive(self):
        records = [KojiRecord(polishing_ratio=r) for r in (64, 65, 70, 75, 76)]
        result = filter_records(records, FilterCriteria(polishing_ratio=70, polishing_range=5))
        assert [r.polishing_ratio for r in result] == [65, 70, 75]

    def test_excludes_76_includes_75(self):
        assert matches_criteria(KojiRecord(polishing_ratio=75), FilterCriteria(polishing_ratio=70, polishing_range=5))
        assert not matches_criteria(KojiRecord(polishing_ratio=76), FilterCriteria(polishing_ratio=70, polishing_range=5))

    def test_zero_center_disables_filter(self):
        records = [KojiRecord(polishing_ratio=r) for r in (40, 90)]
        assert filter_records(records, FilterCriteria(polishing_ratio=0, polishing_range=1)) == records

    def test_zero_range_is_exact(self):
        records = [KojiRecord(polishing_ratio=r) for r in (69, 70, 71)]
        result = filter_records(records, FilterCriteria(polishing_ratio=70, polishing_range=0))
        assert [r.polishing_ratio for r in result] == [70]


class TestWeight:
    def test_min_and_max_inclusive(self, sample_records):
        result = filter_records(sample_records, FilterCriteria(weight_min=250, weight_max=300))
        assert sorted(r.weight for r in result) == [250, 300]

    def test_only_min(self, sample_records):
        result = filter_records(sample_records, FilterCriteria(weight_min=300))
        assert sorted(r.weight for r in result) == [300, 320]

    def test_only_max(self, sample_records):
        result = filter_records(sample_records, FilterCriteria(weight_max=200))
        assert [r.weight for r in result] == [180]


class TestSheets:
    def test_membership(self, sample_records):
        result = filter_records(sample_records, FilterCriteria(sheets=frozenset({6, 4})))
        assert sorted(r.sheets for r in result) == [4, 6, 6]

    def test_combined_with_other_criteria(self, sample_records):
        criteria = FilterCriteria(variety='山田錦', sheets=frozenset({6}), weight_max=310)
        result = filter_records(sample_records, criteria)
        assert [r.date for r in result] == ['2024/7/1']


class TestDehumidifierUnused:
    def test_both_closed_required(self):
        closed = ControlState.FULLY_CLOSED
        records = [
            KojiRecord(machine='a', dehumidifier_in_stage4=closed, dehumidifier_out_stage4=closed),
            KojiRecord(machine='b', dehumidifier_in_stage4=closed, dehumidifier_out_stage4=ControlState.FULLY_OPEN),
            KojiRecord(machine='c', dehumidifier_in_stage4=3.0, dehumidifier_out_stage4=closed),
            KojiRecord(machine='d'),
        ]
        assert [r.machine for r in filter_dehumidifier_unused(records)] == ['a']
