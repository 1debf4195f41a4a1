"""测试共用的假对象：设置、时钟、sleep 与 GUI 适配器。"""

import pytest

from chatgpt_mcp.domain.exceptions import AdapterInteractionFailed, ReplyUnavailable
from chatgpt_mcp.domain.models import UiElement


class SettingsStub:
    app_name = "ChatGPT"
    adapter = "applescript"
    osascript_path = "osascript"
    new_chat_label = "New chat"
    rate_limit_interval_ms = 120000
    launch_settle_seconds = 2.0
    focus_settle_seconds = 1.0
    conversation_settle_seconds = 1.0
    keystroke_settle_seconds = 0.5
    reply_settle_seconds = 5.0


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeSleep:
    """记录每次 sleep 的时长，并把假时钟向前推进。"""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.calls = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.clock.now += seconds


class FakeAdapter:
    name = "fake"

    def __init__(self):
        self.calls = []
        self.running = True
        self.reply = "pong"
        self.clickable = set()
        self.elements = []
        self.fail_on = set()
        self.reply_unavailable = False

    def _record(self, op, *args):
        self.calls.append((op,) + args)
        if op in self.fail_on:
            raise AdapterInteractionFailed(code="SCRIPT_ERROR", message=f"{op} failed")

    async def process_exists(self, app_name):
        self._record("process_exists", app_name)
        return self.running

    async def activate(self, app_name):
        self._record("activate", app_name)

    async def find_and_click_element(self, locator, element_id):
        self._record("click", element_id)
        return element_id in self.clickable

    async def send_keystrokes(self, text):
        self._record("keystrokes", text)

    async def press_return(self):
        self._record("return")

    async def read_element_text(self, locator):
        self._record("read", locator.logical_name)
        if self.reply_unavailable:
            raise ReplyUnavailable(code="REPLY_UNAVAILABLE", message="no text area")
        return self.reply

    async def list_elements(self, locator):
        self._record("list", locator.logical_name)
        return [UiElement(name=n, kind=k) for n, k in self.elements]

    def ops(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def cfg():
    return SettingsStub()


@pytest.fixture
def clock():
    return FakeClock(1000.0)


@pytest.fixture
def sleeper(clock):
    return FakeSleep(clock)


@pytest.fixture
def adapter():
    return FakeAdapter()
