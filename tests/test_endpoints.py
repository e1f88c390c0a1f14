"""
HTTP tests for the compute API.

Every request carries an explicit `now` where the answer depends on the
clock, so these tests are independent of when they run.
"""
import pytest

from conftest import goal_payload


def _entry(day: str, value=None, status: str = "success") -> dict:
    payload = {"check_in_date": day, "status": status}
    if value is not None:
        payload["value"] = value
    return payload


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


# ---------------------------------------------------------------------------
# /safety
# ---------------------------------------------------------------------------

class TestSafetyStatus:
    def test_ahead_of_schedule(self, client):
        body = {
            "goal": goal_payload(),
            "entries": [_entry("2025-01-01", 15)],
            "now": "2025-01-11T00:00:00",
        }
        r = client.post("/safety/status", json=body)
        assert r.status_code == 200
        data = r.json()
        assert data["level"] == "safe"
        assert data["days_of_buffer"] == pytest.approx(5.0)
        assert data["hours_until_deadline"] == pytest.approx(120)
        assert data["deadline"] == "2025-01-16T00:00:00"
        assert data["message"] == "5 days of buffer"
        assert data["current_value"] == 15
        assert data["evaluated_at"] == "2025-01-11T00:00:00"
        assert data["is_overdue"] is False

    def test_overdue_without_entries(self, client):
        body = {"goal": goal_payload(), "now": "2025-01-11T00:00:00"}
        data = client.post("/safety/status", json=body).json()
        assert data["level"] == "overdue"
        assert data["is_overdue"] is True
        assert data["message"] == "OVERDUE! Pay $50"
        assert data["color"] == "text-black"

    def test_missed_entries_ignored(self, client):
        body = {
            "goal": goal_payload(),
            "entries": [_entry("2025-01-02", 15), _entry("2025-01-03", 99, "missed")],
            "now": "2025-01-11T00:00:00",
        }
        assert client.post("/safety/status", json=body).json()["current_value"] == 15

    def test_flat_goal_buffer_is_null(self, client):
        body = {"goal": goal_payload(target_value=0), "now": "2025-01-11T00:00:00"}
        data = client.post("/safety/status", json=body).json()
        assert data["days_of_buffer"] is None
        assert data["level"] == "buffer"
        assert data["deadline"] == "2025-12-31T00:00:00"


class TestDerailment:
    def test_future_crossing(self, client):
        body = {"goal": goal_payload(), "current_value": 10, "now": "2025-01-05T00:00:00"}
        r = client.post("/safety/derailment", json=body)
        assert r.status_code == 200
        assert r.json()["derailment_time"] == "2025-01-11T00:00:00"

    def test_already_crossed(self, client):
        body = {"goal": goal_payload(), "current_value": 1, "now": "2025-01-05T09:00:00"}
        assert client.post("/safety/derailment", json=body).json()["derailment_time"] == (
            "2025-01-05T09:00:00"
        )


# ---------------------------------------------------------------------------
# /series
# ---------------------------------------------------------------------------

class TestTrajectorySeries:
    def test_defaults_to_goal_window(self, client):
        goal = goal_payload(start_date="2025-01-01", end_date="2025-01-03", target_value=2)
        r = client.post("/series/trajectory", json={"goal": goal})
        assert r.status_code == 200
        points = r.json()
        assert [p["at"] for p in points] == [
            "2025-01-01T00:00:00", "2025-01-02T00:00:00", "2025-01-03T00:00:00",
        ]
        assert [p["value"] for p in points] == pytest.approx([0, 2, 4])

    def test_explicit_density(self, client):
        goal = goal_payload(start_date="2025-01-01", end_date="2025-01-03")
        body = {"goal": goal, "start": "2025-01-01T00:00:00",
                "end": "2025-01-02T00:00:00", "points_per_day": 2}
        points = client.post("/series/trajectory", json=body).json()
        assert len(points) == 3
        assert points[1]["at"] == "2025-01-01T12:00:00"
        assert points[1]["value"] == pytest.approx(0.5)

    def test_zero_density_rejected(self, client):
        body = {"goal": goal_payload(), "points_per_day": 0}
        assert client.post("/series/trajectory", json=body).status_code == 422


class TestAggregateSeries:
    _ENTRIES = [
        _entry("2025-01-02", 3),
        _entry("2025-01-02", 5),
        _entry("2025-01-01"),
        _entry("2025-01-03", 50, "pending"),
    ]

    def test_max_per_day(self, client):
        r = client.post("/series/aggregate", json={"entries": self._ENTRIES, "method": "max"})
        assert r.status_code == 200
        assert r.json() == [
            {"day": "2025-01-01", "value": 1.0, "count": 1},
            {"day": "2025-01-02", "value": 5.0, "count": 2},
        ]

    def test_default_is_sum(self, client):
        data = client.post("/series/aggregate", json={"entries": self._ENTRIES}).json()
        assert [d["value"] for d in data] == [1.0, 8.0]

    def test_method_defaults_to_goal_setting(self, client):
        body = {"entries": self._ENTRIES, "goal": goal_payload(aggregation_method="min")}
        data = client.post("/series/aggregate", json=body).json()
        assert [d["value"] for d in data] == [1.0, 3.0]

    def test_explicit_method_beats_goal_setting(self, client):
        body = {
            "entries": self._ENTRIES,
            "goal": goal_payload(aggregation_method="min"),
            "method": "max",
        }
        data = client.post("/series/aggregate", json=body).json()
        assert [d["value"] for d in data] == [1.0, 5.0]

    def test_cumulative(self, client):
        data = client.post("/series/cumulative", json={"entries": self._ENTRIES}).json()
        assert data == [
            {"day": "2025-01-01", "cumulative_value": 1.0},
            {"day": "2025-01-02", "cumulative_value": 9.0},
        ]


class TestFillSeries:
    _BODY = {
        "entries": [_entry("2025-01-01", 2), _entry("2025-01-03", 1)],
        "start": "2025-01-01",
        "end": "2025-01-04",
    }

    def test_fill_marks_gaps(self, client):
        data = client.post("/series/fill", json=self._BODY).json()
        assert [d["day"] for d in data] == [
            "2025-01-01", "2025-01-02", "2025-01-03", "2025-01-04",
        ]
        assert [d["is_filled"] for d in data] == [False, True, False, True]
        assert [d["value"] for d in data] == [2.0, 0.0, 1.0, 0.0]

    def test_auto_fill_flatlines(self, client):
        data = client.post("/series/auto-fill", json=self._BODY).json()
        assert [d["is_actual"] for d in data] == [True, False, True, False]
        assert [d["cumulative_value"] for d in data] == [2.0, 2.0, 3.0, 3.0]

    def test_auto_fill_last_method(self, client):
        body = dict(self._BODY, method="last",
                    entries=[_entry("2025-01-01", 2), _entry("2025-01-01", 7)])
        data = client.post("/series/auto-fill", json=body).json()
        assert data[0]["value"] == 7.0

    def test_auto_fill_uses_goal_last_method(self, client):
        body = dict(self._BODY, goal=goal_payload(aggregation_method="last"),
                    entries=[_entry("2025-01-01", 2), _entry("2025-01-01", 7)])
        data = client.post("/series/auto-fill", json=body).json()
        assert data[0]["value"] == 7.0

    def test_auto_fill_ignores_non_fill_goal_method(self, client):
        body = dict(self._BODY, goal=goal_payload(aggregation_method="max"),
                    entries=[_entry("2025-01-01", 2), _entry("2025-01-01", 7)])
        r = client.post("/series/auto-fill", json=body)
        assert r.status_code == 200
        assert r.json()[0]["value"] == 9.0


class TestRecency:
    def test_with_entries(self, client):
        body = {
            "entries": [_entry("2025-01-02", 3), _entry("2025-01-05", status="missed")],
            "now": "2025-01-07T12:00:00",
        }
        data = client.post("/series/recency", json=body).json()
        assert data["current_value"] == 3
        assert data["last_check_in_date"] == "2025-01-02"
        assert data["days_since_last_check_in"] == 5

    def test_without_entries(self, client):
        data = client.post("/series/recency", json={"entries": []}).json()
        assert data["current_value"] == 0
        assert data["last_check_in_date"] is None
        assert data["days_since_last_check_in"] is None
