"""Tests für REST-Client (httpx.MockTransport) und lokale YAML-Datenquelle."""

import asyncio
import json
from pathlib import Path

import httpx
import pytest

from api.client import ApiError, HttpTimetableApi
from data.local_store import LocalTimetableStore, StoreError
from data.sample_data import SampleDataGenerator
from models.slot import Slot


def _client(handler, token="geheim") -> HttpTimetableApi:
    return HttpTimetableApi(
        "http://schule.test/api/", token=token,
        transport=httpx.MockTransport(handler),
    )


def _ok(data) -> httpx.Response:
    return httpx.Response(200, json={"success": True, "data": data})


def _run(api: HttpTimetableApi, coro_fn):
    async def go():
        async with api:
            return await coro_fn(api)
    return asyncio.run(go())


# ─── REST-CLIENT ──────────────────────────────────────────────────────────────

class TestHttpTimetableApi:
    def test_get_timetable_parses_entries(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return _ok({"timetable": [{
                "id": "e1", "class_id": "C10A", "subject_id": "S-M",
                "day_of_week": 0, "period_number": 1,
                "subject_name": "Mathematik", "start_time": "08:00:00",
            }]})

        entries = _run(_client(handler), lambda api: api.get_timetable(class_id="C10A"))
        assert len(entries) == 1
        assert entries[0].subject_name == "Mathematik"
        assert requests[0].url.path == "/api/timetable"
        assert requests[0].url.params["class_id"] == "C10A"
        assert requests[0].headers["Authorization"] == "Bearer geheim"

    @pytest.mark.parametrize("value", [None, "", "all"])
    def test_all_filter_is_omitted(self, value):
        """None, "" und "all" senden keinen Filter-Parameter."""
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            return _ok({"timetable": []})

        _run(_client(handler), lambda api: api.get_timetable(class_id=value, teacher_id=value))
        assert seen == [{}]

    def test_teacher_filter(self):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            return _ok({"timetable": []})

        _run(_client(handler), lambda api: api.get_timetable(teacher_id="T01"))
        assert seen == [{"teacher_id": "T01"}]

    def test_catalogs(self):
        def handler(request):
            if request.url.path.endswith("/subjects"):
                assert request.url.params["class_id"] == "C10A"
                return _ok({"subjects": [{"id": "S-M", "name": "Mathematik"}]})
            if request.url.path.endswith("/teachers"):
                return _ok({"teachers": [{"id": "T01", "name": "Anna Müller"}]})
            return _ok({"classes": [{"id": "C10A", "name": "10", "section": "A"}]})

        async def calls(api):
            return (
                await api.get_subjects_by_class("C10A"),
                await api.get_teachers(),
                await api.get_classes(),
            )

        subjects, teachers, classes = _run(_client(handler), calls)
        assert subjects[0].name == "Mathematik"
        assert teachers[0].id == "T01"
        assert classes[0].label == "10-A"

    def test_bulk_save_body(self):
        bodies = []

        def handler(request):
            assert request.method == "POST"
            assert request.url.path == "/api/timetable/bulk"
            bodies.append(json.loads(request.content))
            return _ok({"count": 1})

        slot = Slot(class_id="C10A", day_of_week=0, period_number=1,
                    subject_id="S-M", teacher_id="T01", room="101")
        count = _run(_client(handler), lambda api: api.bulk_save_timetable("C10A", [slot]))
        assert count == 1
        assert bodies == [{
            "class_id": "C10A",
            "entries": [{
                "day_of_week": 0, "period_number": 1,
                "subject_id": "S-M", "teacher_id": "T01", "room": "101",
            }],
        }]

    def test_error_envelope(self):
        """success=false wird mit Meldung und Code als ApiError gemeldet."""
        def handler(request):
            return httpx.Response(400, json={
                "success": False,
                "error": {"message": "Klasse unbekannt", "code": "NOT_FOUND"},
            })

        with pytest.raises(ApiError) as exc:
            _run(_client(handler), lambda api: api.get_timetable())
        assert str(exc.value) == "Klasse unbekannt"
        assert exc.value.status == 400
        assert exc.value.code == "NOT_FOUND"

    def test_error_without_body(self):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        with pytest.raises(ApiError) as exc:
            _run(_client(handler), lambda api: api.get_teachers())
        assert exc.value.status == 502
        assert "502" in str(exc.value)

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("keine Verbindung", request=request)

        with pytest.raises(ApiError) as exc:
            _run(_client(handler), lambda api: api.get_classes())
        assert exc.value.code == "NETWORK_ERROR"

    def test_no_token_no_auth_header(self):
        seen = []

        def handler(request):
            seen.append("Authorization" in request.headers)
            return _ok({"teachers": []})

        _run(_client(handler, token=None), lambda api: api.get_teachers())
        assert seen == [False]


# ─── LOKALE DATENQUELLE ───────────────────────────────────────────────────────

@pytest.fixture
def store(tmp_path: Path) -> LocalTimetableStore:
    s = LocalTimetableStore(tmp_path / "timetable.yaml")
    s.write({
        "classes": [
            {"id": "C10A", "name": "10", "section": "A"},
            {"id": "C10B", "name": "10", "section": "B"},
        ],
        "subjects": [
            {"id": "S-M", "name": "Mathematik", "code": "M", "class_ids": []},
            {"id": "S-L", "name": "Latein", "code": "L", "class_ids": ["C10B"]},
        ],
        "teachers": [{"id": "T01", "name": "Anna Müller"}],
        "timetable": [
            {"id": "a", "class_id": "C10A", "subject_id": "S-M", "teacher_id": "T01",
             "day_of_week": 1, "period_number": 2},
            {"id": "b", "class_id": "C10A", "subject_id": "S-M",
             "day_of_week": 0, "period_number": 3},
            {"id": "c", "class_id": "C10B", "subject_id": "S-L", "teacher_id": "T01",
             "day_of_week": 0, "period_number": 1},
        ],
    })
    return s


class TestLocalTimetableStore:
    def test_missing_file_is_empty(self, tmp_path: Path):
        s = LocalTimetableStore(tmp_path / "fehlt.yaml")
        assert asyncio.run(s.get_timetable()) == []
        assert asyncio.run(s.get_classes()) == []

    def test_timetable_joined_and_sorted(self, store):
        entries = asyncio.run(store.get_timetable(class_id="C10A"))
        assert [(e.day_of_week, e.period_number) for e in entries] == [(0, 3), (1, 2)]
        assert entries[1].teacher_name == "Anna Müller"
        assert entries[1].subject_name == "Mathematik"
        assert entries[0].class_name == "10"
        assert entries[0].section == "A"

    def test_teacher_filter_spans_classes(self, store):
        entries = asyncio.run(store.get_timetable(teacher_id="T01"))
        assert {e.class_id for e in entries} == {"C10A", "C10B"}

    def test_subjects_by_class(self, store):
        a = asyncio.run(store.get_subjects_by_class("C10A"))
        b = asyncio.run(store.get_subjects_by_class("C10B"))
        assert [s.id for s in a] == ["S-M"]
        assert [s.id for s in b] == ["S-M", "S-L"]

    def test_bulk_save_replaces_only_that_class(self, store):
        slot = Slot(class_id="C10A", day_of_week=4, period_number=5, subject_id="S-M")
        assert asyncio.run(store.bulk_save_timetable("C10A", [slot])) == 1

        a = asyncio.run(store.get_timetable(class_id="C10A"))
        b = asyncio.run(store.get_timetable(class_id="C10B"))
        assert [(e.day_of_week, e.period_number) for e in a] == [(4, 5)]
        assert a[0].id
        assert len(b) == 1

    def test_bulk_save_empty_clears_class(self, store):
        assert asyncio.run(store.bulk_save_timetable("C10A", [])) == 0
        assert asyncio.run(store.get_timetable(class_id="C10A")) == []

    def test_bulk_save_unknown_class(self, store):
        with pytest.raises(StoreError):
            asyncio.run(store.bulk_save_timetable("C99Z", []))

    def test_bulk_save_foreign_slot(self, store):
        slot = Slot(class_id="C10B", day_of_week=0, period_number=1, subject_id="S-M")
        with pytest.raises(StoreError):
            asyncio.run(store.bulk_save_timetable("C10A", [slot]))
        assert len(asyncio.run(store.get_timetable(class_id="C10A"))) == 2

    def test_broken_file(self, tmp_path: Path):
        path = tmp_path / "kaputt.yaml"
        path.write_text("classes: [unclosed\n", encoding="utf-8")
        with pytest.raises(StoreError):
            LocalTimetableStore(path).read()


# ─── BEISPIELDATEN ────────────────────────────────────────────────────────────

class TestSampleData:
    def test_reproducible(self):
        assert SampleDataGenerator(seed=7).generate() == SampleDataGenerator(seed=7).generate()

    def test_special_cases(self, tmp_path: Path):
        """Randstunden in der ersten Klasse, letzte Klasse ohne Einträge."""
        store = LocalTimetableStore(tmp_path / "demo.yaml")
        data = SampleDataGenerator().write(store)
        first, last = data["classes"][0]["id"], data["classes"][-1]["id"]

        entries = asyncio.run(store.get_timetable(class_id=first))
        assert max(e.period_number for e in entries) == 10
        assert asyncio.run(store.get_timetable(class_id=last)) == []

    def test_one_entry_per_cell(self):
        data = SampleDataGenerator(seed=3).generate()
        cells = [(r["class_id"], r["day_of_week"], r["period_number"])
                 for r in data["timetable"]]
        assert len(cells) == len(set(cells))


# ─── UNGÜLTIGE ODER ABWEICHENDE DATEN ─────────────────────────────────────────

class TestStoredDataTolerance:
    def test_http_unpadded_time_is_read(self):
        """Uhrzeiten wie "9:00" sind beschreibend und brechen das Lesen nicht ab."""
        def handler(request):
            return _ok({"timetable": [{
                "class_id": "C10A", "subject_id": "S-M", "day_of_week": 0,
                "period_number": 1, "start_time": "9:00", "end_time": "9:45",
            }]})

        entries = _run(_client(handler), lambda api: api.get_timetable(class_id="C10A"))
        assert entries[0].start_time == "9:00"

    def test_http_invalid_record_is_api_error(self):
        def handler(request):
            return _ok({"timetable": [{"class_id": "C10A", "day_of_week": 9,
                                       "period_number": 1}]})

        with pytest.raises(ApiError) as exc:
            _run(_client(handler), lambda api: api.get_timetable())
        assert exc.value.code == "INVALID_DATA"

    def test_store_unpadded_time_and_invalid_row(self, tmp_path: Path):
        s = LocalTimetableStore(tmp_path / "timetable.yaml")
        s.write({"timetable": [
            {"id": "a", "class_id": "C10A", "subject_id": "S-M",
             "day_of_week": 0, "period_number": 1, "start_time": "9:00"},
        ]})
        assert asyncio.run(s.get_timetable())[0].start_time == "9:00"

        s.write({"timetable": [
            {"id": "b", "class_id": "C10A", "day_of_week": 0, "period_number": 0},
        ]})
        with pytest.raises(StoreError):
            asyncio.run(s.get_timetable())
