"""
SessionManager health bookkeeping, without launching Chromium.
"""
from dataclasses import replace

import pytest

from .errors import BrowserCrashed
from .pacing import PacingPolicy
from .session import SessionManager


class _FakeBrowser:
    def __init__(self, connected=True):
        self.connected = connected
        self.closed = False

    def is_connected(self):
        return self.connected

    async def close(self):
        self.closed = True
        self.connected = False


def _session(config, browser=None, launches=None):
    session = SessionManager(config, PacingPolicy.disabled())
    session._browser = browser

    async def fake_launch():
        launches.append(1)
        session._browser = _FakeBrowser()
        session._fault = None
        session._requests = 0

    if launches is not None:
        session._launch = fake_launch
    return session


def test_healthy_browser_has_no_reason(config):
    session = _session(config, _FakeBrowser())
    assert session.is_running
    assert session.unhealthy_reason() is None


def test_disconnect_marks_session_unhealthy(config):
    browser = _FakeBrowser()
    session = _session(config, browser)
    session._on_disconnected(browser)
    assert session.unhealthy_reason() == "browser disconnected"
    with pytest.raises(BrowserCrashed):
        session.check_health(RuntimeError("Target closed"))


def test_request_budget_triggers_recycle(config):
    session = _session(replace(config, max_requests_per_browser=5), _FakeBrowser())
    session._requests = 4
    assert session.unhealthy_reason() is None
    session._requests = 5
    assert session.unhealthy_reason() == "request budget of 5 reached"
    # Budget exhaustion is not a crash.
    session.check_health(RuntimeError("boom"))


@pytest.mark.asyncio
async def test_first_use_launches_lazily(config):
    launches = []
    session = _session(config, None, launches)
    assert not session.is_running
    await session.recycle_if_unhealthy()
    await session.recycle_if_unhealthy()
    assert launches == [1]
    assert session.is_running


@pytest.mark.asyncio
async def test_unhealthy_browser_is_replaced(config):
    launches = []
    dead = _FakeBrowser(connected=False)
    session = _session(config, dead, launches)
    await session.recycle_if_unhealthy()
    assert dead.closed
    assert launches == [1]
    assert session.unhealthy_reason() is None


@pytest.mark.asyncio
async def test_relaunch_always_replaces(config):
    launches = []
    healthy = _FakeBrowser()
    session = _session(config, healthy, launches)
    await session.relaunch()
    assert healthy.closed
    assert session._browser is not healthy
    assert launches == [1]


class _FakePage:
    url = "https://example-market.test/cars"

    def __init__(self):
        self.handlers = {}

    def on(self, event, handler):
        self.handlers[event] = handler


class _FakeContext:
    def __init__(self, kwargs):
        self.kwargs = kwargs
        self.timeout = None
        self.navigation_timeout = None
        self.saved_to = None
        self.closed = False

    def set_default_timeout(self, ms):
        self.timeout = ms

    def set_default_navigation_timeout(self, ms):
        self.navigation_timeout = ms

    async def new_page(self):
        return _FakePage()

    async def storage_state(self, path):
        self.saved_to = path

    async def close(self):
        self.closed = True


class _ContextBrowser(_FakeBrowser):
    async def new_context(self, **kwargs):
        return _FakeContext(kwargs)


@pytest.mark.asyncio
async def test_acquire_context_applies_identity_and_timeouts(config):
    session = SessionManager(
        replace(config, read_timeout_ms=1234, navigation_timeout_ms=5678),
        PacingPolicy.disabled(user_agent="test-agent"),
    )
    session._browser = _ContextBrowser()
    context = await session.acquire_context()
    assert context.kwargs["user_agent"] == "test-agent"
    assert context.kwargs["viewport"] == {"width": 1280, "height": 900}
    assert context.kwargs["locale"] == "nl-BE"
    assert "storage_state" not in context.kwargs
    assert context.timeout == 1234
    assert context.navigation_timeout == 5678
    assert session.requests_served == 1


@pytest.mark.asyncio
async def test_existing_storage_state_seeds_context(config, tmp_path):
    jar = tmp_path / "storage_state.json"
    jar.write_text('{"cookies": [], "origins": []}', encoding="utf-8")
    session = SessionManager(replace(config, storage_state_path=str(jar)), PacingPolicy.disabled())
    session._browser = _ContextBrowser()
    context = await session.acquire_context()
    assert context.kwargs["storage_state"] == str(jar)


@pytest.mark.asyncio
async def test_missing_storage_state_file_is_skipped(config, tmp_path):
    jar = tmp_path / "absent.json"
    session = SessionManager(replace(config, storage_state_path=str(jar)), PacingPolicy.disabled())
    session._browser = _ContextBrowser()
    context = await session.acquire_context()
    assert "storage_state" not in context.kwargs


@pytest.mark.asyncio
async def test_release_writes_cookie_jar_when_persisting(config, tmp_path):
    jar = str(tmp_path / "storage_state.json")
    session = SessionManager(replace(config, storage_state_path=jar, persist_identity=True), PacingPolicy.disabled())
    session._browser = _ContextBrowser()
    context = await session.acquire_context()
    await session.release(context)
    assert context.saved_to == jar
    assert context.closed


@pytest.mark.asyncio
async def test_release_without_persistence_only_closes(config, tmp_path):
    jar = str(tmp_path / "storage_state.json")
    session = SessionManager(replace(config, storage_state_path=jar), PacingPolicy.disabled())
    session._browser = _ContextBrowser()
    context = await session.acquire_context()
    await session.release(context)
    assert context.saved_to is None
    assert context.closed


@pytest.mark.asyncio
async def test_release_skips_cookie_jar_on_unhealthy_browser(config, tmp_path):
    jar = str(tmp_path / "storage_state.json")
    browser = _ContextBrowser()
    session = SessionManager(replace(config, storage_state_path=jar, persist_identity=True), PacingPolicy.disabled())
    session._browser = browser
    context = await session.acquire_context()
    session._on_disconnected(browser)
    await session.release(context)
    assert context.saved_to is None
    assert context.closed


@pytest.mark.asyncio
async def test_page_crash_is_reported_as_browser_crash(config):
    session = SessionManager(config, PacingPolicy.disabled())
    session._browser = _ContextBrowser()
    context = await session.acquire_context()
    page = await session.new_page(context)
    session.check_health(RuntimeError("before crash"))

    page.handlers["crash"](page)
    assert session.unhealthy_reason() == "page crashed"
    with pytest.raises(BrowserCrashed) as exc_info:
        session.check_health(RuntimeError("Target crashed"))
    assert "page crashed" in str(exc_info.value)
