"""
Tests for grouping: brewing year (June → May) assignment and group ordering.
"""
from datetime import date, datetime

import pytest

from grouping import (
    get_brewing_year, get_brewing_year_label, get_year_period,
    group_by_brewing_year, parse_record_date,
)
from models import KojiRecord


class TestParseRecordDate:
    @pytest.mark.parametrize("text", ['2024-07-01', '2024/7/1', '2024/07/01', '2024.7.1', '2024年7月1日'])
    def test_supported_formats(self, text):
        assert parse_record_date(text) == date(2024, 7, 1)

    def test_datetime_text_keeps_date_part(self):
        assert parse_record_date('2024/7/1 0:00:00') == date(2024, 7, 1)

    def test_date_objects(self):
        assert parse_record_date(date(2024, 7, 1)) == date(2024, 7, 1)
        assert parse_record_date(datetime(2024, 7, 1, 9, 30)) == date(2024, 7, 1)

    @pytest.mark.parametrize("text", ['', None, '7/1', 'not a date', '2024/13/01'])
    def test_unparseable(self, text):
        assert parse_record_date(text) is None


class TestBrewingYear:
    def test_july_starts_new_year(self):
        assert get_brewing_year('2024-07-01') == 6

    def test_march_belongs_to_prior_year(self):
        assert get_brewing_year('2024-03-01') == 5

    def test_boundaries(self):
        assert get_brewing_year('2024-05-31') == 5
        assert get_brewing_year('2024-06-01') == 6
        assert get_brewing_year('2025-05-31') == 6

    def test_unparseable_is_none(self):
        assert get_brewing_year('???') is None

    def test_label(self):
        assert get_brewing_year_label(6) == 'R6BY'
        assert get_brewing_year_label(None) == '不明'


class TestYearPeriod:
    def test_period_starts_june(self):
        assert get_year_period('R6BY') == '2024/6/1〜2025/5/31'

    def test_leap_year_end(self):
        assert get_year_period('R5BY') == '2023/6/1〜2024/5/31'

    def test_non_matching_label(self):
        assert get_year_period('不明') == ''
        assert get_year_period('') == ''


class TestGroupByBrewingYear:
    def test_assignment_and_descending_order(self, sample_records):
        groups = group_by_brewing_year(sample_records)

        assert [g.label for g in groups] == ['R6BY', 'R5BY']
        assert [r.date for r in groups[0].records] == ['2024/7/1', '2025/1/10']
        assert [r.date for r in groups[1].records] == ['2024/3/1', '2023/11/15']

    def test_group_period_and_year(self, sample_records):
        group = group_by_brewing_year(sample_records)[0]
        assert group.year == 6
        assert group.period == '2024/6/1〜2025/5/31'

    def test_sort_by_date_within_group(self, sample_records):
        groups = group_by_brewing_year(sample_records, sort_by_date=True)
        assert [r.date for r in groups[1].records] == ['2023/11/15', '2024/3/1']

    def test_every_record_in_exactly_one_group(self, sample_records):
        groups = group_by_brewing_year(sample_records)
        grouped = [r for g in groups for r in g.records]
        assert len(grouped) == len(sample_records)
        assert all(r in grouped for r in sample_records)

    def test_undated_records_last(self):
        records = [KojiRecord(date='bad'), KojiRecord(date='2019/6/1'), KojiRecord(date='2024/6/1')]
        groups = group_by_brewing_year(records)
        assert [g.label for g in groups] == ['R6BY', 'R1BY', '不明']
        assert groups[-1].year is None
        assert groups[-1].period == ''

    def test_empty(self):
        assert group_by_brewing_year([]) == []
