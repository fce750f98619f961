"""
Tests for price row sources.
"""

import asyncio
import json
import threading

import pytest

from quotes import parse_rows
from sources import (
    PriceSource, PriceSourceError, SimulatedPriceSource, StaticPriceSource,
    create_price_source,
)
from api import ArbitrageService
from sources.sheets import SheetsPriceSource


class FakeRequest:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error

    def execute(self, http=None):
        if self.error:
            raise self.error
        return self.response


class FakeSheetsService:
    """Stands in for the Sheets API resource: spreadsheets().values().get().execute()"""

    def __init__(self, response=None, error=None):
        self.request = FakeRequest(response, error)
        self.calls = []

    def spreadsheets(self):
        return self

    def values(self):
        return self

    def get(self, spreadsheetId, range):
        self.calls.append((spreadsheetId, range))
        return self.request


class TestStaticPriceSource:

    def test_returns_rows(self):
        rows = [["t1", "BNB", "USDT", "1", "2"]]
        source = StaticPriceSource(rows)

        assert asyncio.run(source.fetch()) == rows

    def test_returns_copies(self):
        source = StaticPriceSource([["t1", "BNB", "USDT", "1", "2"]])

        fetched = asyncio.run(source.fetch())
        fetched[0][3] = "999"

        assert asyncio.run(source.fetch())[0][3] == "1"

    def test_empty(self):
        assert asyncio.run(StaticPriceSource().fetch()) == []


class TestPriceSourceErrors:
    """Tests for failure handling shared by all sources"""

    def test_source_error_becomes_empty_batch(self, caplog):
        class FailingSource(PriceSource):
            async def _fetch_rows(self):
                raise PriceSourceError("sheet unavailable")

        with caplog.at_level("ERROR"):
            rows = asyncio.run(FailingSource("failing").fetch())

        assert rows == []
        assert "sheet unavailable" in caplog.text

    def test_unexpected_error_becomes_empty_batch(self, caplog):
        class BrokenSource(PriceSource):
            async def _fetch_rows(self):
                raise RuntimeError("boom")

        with caplog.at_level("ERROR"):
            rows = asyncio.run(BrokenSource("broken").fetch())

        assert rows == []
        assert "boom" in caplog.text


class TestSimulatedPriceSource:

    def test_rows_are_sheet_shaped(self):
        source = SimulatedPriceSource(pairs=["BNB/USDT", "ETH/USDT"], seed=42)

        rows = asyncio.run(source.fetch())

        assert len(rows) == 2
        assert [row[1:3] for row in rows] == [["BNB", "USDT"], ["ETH", "USDT"]]
        parsed = parse_rows(rows)
        assert len(parsed.quotes) == 2
        assert parsed.rejections == ()

    def test_unknown_pairs_skipped(self):
        source = SimulatedPriceSource(pairs=["BNB/USDT", "DOGE/USDT"], seed=1)

        assert source.pairs == ["BNB/USDT"]

    def test_prices_stay_near_base(self):
        source = SimulatedPriceSource(pairs=["BNB/USDT"], max_offset_percent=0.3, seed=7)

        for _ in range(20):
            row = asyncio.run(source.fetch())[0]
            assert 290 < float(row[3]) < 330
            assert 290 < float(row[4]) < 330


class TestSheetsPriceSource:
    """Tests for the Google Sheets source with a fake API resource"""

    def test_fetch_rows(self):
        service = FakeSheetsService({"values": [["t1", "BNB", "USDT", "310.5", "309.8"]]})
        source = SheetsPriceSource(spreadsheet_id="sheet-id", sheet_range="Prices!A:E", service=service)

        rows = asyncio.run(source.fetch())

        assert rows == [["t1", "BNB", "USDT", "310.5", "309.8"]]
        assert service.calls == [("sheet-id", "Prices!A:E")]

    def test_header_rows_dropped(self):
        service = FakeSheetsService({"values": [
            ["Timestamp", "Token In", "Token Out", "PancakeSwap", "BakerySwap"],
            ["t1", "BNB", "USDT", "310.5", "309.8"],
        ]})
        source = SheetsPriceSource(spreadsheet_id="sheet-id", header_rows=1, service=service)

        assert asyncio.run(source.fetch()) == [["t1", "BNB", "USDT", "310.5", "309.8"]]

    def test_empty_sheet(self, caplog):
        """Test a sheet with no values is reported as no data"""
        source = SheetsPriceSource(spreadsheet_id="sheet-id", service=FakeSheetsService({}))

        with caplog.at_level("ERROR"):
            assert asyncio.run(source.fetch()) == []

        assert "No data found in the spreadsheet." in caplog.text

    def test_api_error(self):
        service = FakeSheetsService(error=RuntimeError("quota exceeded"))
        source = SheetsPriceSource(spreadsheet_id="sheet-id", service=service)

        assert asyncio.run(source.fetch()) == []

    @pytest.mark.parametrize("spreadsheet_id, credentials, message", [
        (None, json.dumps({"type": "service_account"}), "SPREADSHEET_ID is not set"),
        ("sheet-id", None, "GOOGLE_CREDENTIALS is not set"),
        ("sheet-id", "{not json", "GOOGLE_CREDENTIALS is not valid JSON"),
    ])
    def test_missing_configuration(self, caplog, spreadsheet_id, credentials, message):
        source = SheetsPriceSource(spreadsheet_id=spreadsheet_id, credentials_json=credentials)

        with caplog.at_level("ERROR"):
            assert asyncio.run(source.fetch()) == []

        assert message in caplog.text

    def test_close_drops_client(self):
        source = SheetsPriceSource(spreadsheet_id="sheet-id", service=FakeSheetsService({"values": []}))

        asyncio.run(source.close())

        assert source._service is None


class HangingOnceRequest:
    """First execute() blocks until released; later ones answer at once"""

    def __init__(self, response):
        self.response = response
        self.release = threading.Event()
        self.calls = 0
        self._calls_lock = threading.Lock()

    def execute(self, http=None):
        with self._calls_lock:
            self.calls += 1
            first = self.calls == 1
        if first:
            self.release.wait(timeout=5)
        return self.response


class TestSheetsPriceSourceConcurrency:
    """Tests for slow or stuck Sheets requests"""

    def test_stuck_request_does_not_block_next_one(self):
        """Test a request that hangs past the timeout leaves later requests working"""
        request = HangingOnceRequest({"values": [["t1", "BNB", "USDT", "2", "1"]]})
        service = FakeSheetsService()
        service.request = request
        checker = ArbitrageService(fetch_timeout_s=0.2)
        checker.set_source(SheetsPriceSource(spreadsheet_id="sheet-id", service=service))

        async def run():
            try:
                first = await checker.fetch_rows()
                second = await checker.fetch_rows()
            finally:
                request.release.set()
            return first, second

        first, second = asyncio.run(run())

        assert first == []
        assert second == [["t1", "BNB", "USDT", "2", "1"]]

    def test_each_request_gets_timed_connection(self):
        source = SheetsPriceSource(spreadsheet_id="sheet-id", timeout_s=3.0)
        source._credentials = object()

        first = source._new_http()
        second = source._new_http()

        assert first is not second
        assert first.http.timeout == 3.0

    def test_no_http_override_for_injected_service(self):
        source = SheetsPriceSource(spreadsheet_id="sheet-id", service=FakeSheetsService({}))

        assert source._new_http() is None

    def test_client_built_off_event_loop(self, monkeypatch):
        """Test credential parsing and client build happen in a worker thread"""
        service = FakeSheetsService({"values": [["t1", "BNB", "USDT", "1", "2"]]})
        source = SheetsPriceSource(spreadsheet_id="sheet-id", credentials_json="{}")
        build_threads = []

        def fake_get_service():
            build_threads.append(threading.get_ident())
            return service

        monkeypatch.setattr(source, "_get_service", fake_get_service)

        assert asyncio.run(source.fetch()) == [["t1", "BNB", "USDT", "1", "2"]]
        assert build_threads and build_threads[0] != threading.get_ident()


class TestCreatePriceSource:

    def test_simulation(self):
        assert isinstance(create_price_source("simulation"), SimulatedPriceSource)

    def test_sheets(self):
        assert isinstance(create_price_source("sheets"), SheetsPriceSource)

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            create_price_source("cpp")
