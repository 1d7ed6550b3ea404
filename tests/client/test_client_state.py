from __future__ import annotations

from datetime import date, timedelta
from urllib.parse import urlsplit

import pytest

from src.timeclock.timeclock.client.api_client import ApiClient, ApiError
from src.timeclock.timeclock.client.state import AuthState, PTOState, TimeState


class FlaskResponse:
    """Just enough of ``requests.Response`` for ApiClient."""

    def __init__(self, resp):
        self._resp = resp
        self.status_code = resp.status_code
        self.headers = resp.headers
        self.content = resp.data
        self.text = resp.data.decode("utf-8", "replace")
        self.reason = resp.status

    def json(self):
        data = self._resp.get_json(silent=True)
        if data is None:
            raise ValueError("not json")
        return data


class FlaskSession:
    """Routes ApiClient traffic into the Flask test client."""

    def __init__(self, flask_client):
        self._client = flask_client
        self.calls: list[tuple[str, str]] = []

    def request(self, method, url, *, params=None, json=None, headers=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append((method, path))
        resp = self._client.open(path, method=method, query_string=params, json=json, headers=headers)
        return FlaskResponse(resp)


@pytest.fixture
def session(app):
    return FlaskSession(app.test_client())


@pytest.fixture
def api(session):
    return ApiClient("http://testserver/", session=session)


def test_login_sets_token_and_logout_clears(api, staff):
    auth = AuthState(api)

    user = auth.login(staff.email, "Staff123!")
    assert user["email"] == staff.email
    assert api.token
    assert auth.is_authenticated and not auth.is_admin
    assert auth.refresh()["id"] == staff.user_id

    auth.logout()
    assert api.token is None
    assert auth.refresh() is None


def test_api_error_carries_server_message(api, staff):
    with pytest.raises(ApiError) as exc:
        AuthState(api).login(staff.email, "wrong")

    assert exc.value.status == 401
    assert exc.value.message == "Invalid email or password"


def test_clock_in_invalidates_then_refreshes(api, session, staff):
    AuthState(api).login(staff.email, "Staff123!")
    time_state = TimeState(api)

    time_state.clock_in()
    assert time_state.is_clocked_in
    assert ("GET", "/api/time/stats") in session.calls
    assert len(time_state.entries) == 1

    time_state.clock_out()
    assert not time_state.is_clocked_in

    time_state.delete_entry(time_state.entries[0]["id"])
    assert time_state.entries is None


def test_pto_summaries_are_cached_until_create(api, session, staff):
    AuthState(api).login(staff.email, "Staff123!")
    pto = PTOState(api)
    when = date.today() + timedelta(days=40)

    assert pto.monthly_count(when.year, when.month) == 0
    pto.monthly_count(when.year, when.month)
    month_path = f"/api/pto/user/month/{when.year}/{when.month}"
    assert session.calls.count(("GET", month_path)) == 1

    pto.create_request(when, 4, "Trip")
    assert pto.monthly == {}
    assert pto.yearly_hours(when.year)["yearly_limit"] == 192
    assert [r["reason"] for r in pto.refresh()] == ["Trip"]


def test_download_reads_attachment_name(api, admin):
    AuthState(api).login(admin.email, "Admin123!")

    content, filename = api.download("/api/admin/table/export")
    assert content[:2] == b"PK"
    assert filename.startswith("pto-requests-")
