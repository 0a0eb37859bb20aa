"""
Tests for data_source: file loading, error reporting and derived sidebar info.
"""
import io
from datetime import date

import pytest

import data_source
from config import DATA_SOURCE
from data_source import (
    DataLoadError, get_csv_path, get_data_summary, get_filter_options,
    load_koji_records, load_uploaded_records,
)
from models import KojiRecord


class TestGetCsvPath:
    def test_secret_overrides_default(self, monkeypatch):
        monkeypatch.setattr(data_source.st, 'secrets', {'data': {'csv_path': 'other.csv'}})
        assert get_csv_path() == 'other.csv'

    def test_default_when_not_configured(self, monkeypatch):
        monkeypatch.setattr(data_source.st, 'secrets', {})
        assert get_csv_path() == DATA_SOURCE['default_csv_path']


class TestLoadKojiRecords:
    def test_loads_utf8_file(self, tmp_path, make_row, make_csv):
        path = tmp_path / 'records.csv'
        path.write_text(make_csv(make_row(machine='1号機', variety='山田錦')), encoding='utf-8')

        records = load_koji_records(str(path))

        assert len(records) == 1
        assert records[0].variety == '山田錦'

    def test_loads_cp932_file(self, tmp_path, make_row, make_csv):
        path = tmp_path / 'records.csv'
        path.write_bytes(make_csv(make_row(variety='雄町', dehumidifier_in_stage4='全閉')).encode('cp932'))

        records = load_koji_records(str(path))

        assert records[0].variety == '雄町'
        assert records[0].dehumidifier_in_stage4 == '全閉'

    def test_missing_file_raises(self, tmp_path):
        missing = tmp_path / 'nope.csv'
        with pytest.raises(DataLoadError) as excinfo:
            load_koji_records(str(missing))
        assert 'nope.csv' in str(excinfo.value)

    def test_undecodable_file_raises(self, tmp_path, monkeypatch):
        monkeypatch.setitem(DATA_SOURCE, 'encodings', ['utf-8'])
        path = tmp_path / 'broken.csv'
        path.write_bytes(b'\xff\xfe\xfa\n')
        with pytest.raises(DataLoadError):
            load_koji_records(str(path))


class TestLoadUploadedRecords:
    def test_reads_and_rewinds(self, make_row, make_csv):
        upload = io.BytesIO(make_csv(make_row(machine='3号機')).encode('utf-8'))
        upload.name = 'upload.csv'

        records = load_uploaded_records(upload)

        assert [r.machine for r in records] == ['3号機']
        assert upload.tell() == 0


class TestFilterOptions:
    def test_sorted_unique_non_empty(self):
        records = [
            KojiRecord(variety='雄町', origin='岡山', sheets=5),
            KojiRecord(variety='山田錦', origin='兵庫', sheets=6),
            KojiRecord(variety='山田錦', origin='', sheets=0),
            KojiRecord(variety='', origin='兵庫', sheets=6),
        ]
        options = get_filter_options(records)

        assert options.varieties == sorted(['雄町', '山田錦'])
        assert options.origins == sorted(['岡山', '兵庫'])
        assert options.sheets == [6, 5]

    def test_empty(self):
        options = get_filter_options([])
        assert options.varieties == []
        assert options.sheets == []


class TestDataSummary:
    def test_summary(self, sample_records):
        records = sample_records + [KojiRecord(date='?', machine='1号機')]
        summary = get_data_summary(records)

        assert summary['record_count'] == 5
        assert summary['min_date'] == date(2023, 11, 15)
        assert summary['max_date'] == date(2025, 1, 10)
        assert summary['undated_count'] == 1
        assert summary['machines'] == ['1号機', '2号機']
