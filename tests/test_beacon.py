import asyncio

import httpx

from syrupcalc.beacon import VisitorBeacon, VisitorInfo, compose_message, dispatch_in_background, guess_platform

UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class FakeBot:
    def __init__(self):
        self.sent = []

    async def send_message(self, **kwargs):
        self.sent.append(kwargs)


def _transport(calls, payload=None, error=None):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        if error is not None:
            raise error("boom", request=request)
        return httpx.Response(200, json=payload or {})
    return httpx.MockTransport(handler)


def test_notify_sends_markdown_message():
    calls, bot = [], FakeBot()
    beacon = VisitorBeacon(
        "token", "42", ipapi_url="https://geo.test/",
        transport=_transport(calls, {"city": "Cairo", "country_name": "Egypt", "ip": "203.0.113.7"}),
        bot=bot,
    )
    ok = asyncio.run(beacon.notify(VisitorInfo(ip="203.0.113.7", user_agent=UA)))

    assert ok is True
    assert calls == ["https://geo.test/203.0.113.7/json/"]
    assert len(bot.sent) == 1
    msg = bot.sent[0]
    assert msg["chat_id"] == "42"
    assert msg["parse_mode"] == "Markdown"
    assert "*New Website Visitor!*" in msg["text"]
    assert "Cairo, Egypt" in msg["text"]
    assert "203.0.113.7" in msg["text"]
    assert "Win32" in msg["text"]


def test_unknown_ip_uses_caller_lookup():
    calls = []
    beacon = VisitorBeacon("token", "42", ipapi_url="https://geo.test", transport=_transport(calls), bot=FakeBot())
    asyncio.run(beacon.notify(VisitorInfo()))
    assert calls == ["https://geo.test/json/"]


def test_missing_credentials_skip_everything():
    calls, bot = [], FakeBot()
    beacon = VisitorBeacon(None, "42", transport=_transport(calls), bot=bot)
    assert beacon.configured is False
    assert asyncio.run(beacon.notify(VisitorInfo(ip="1.2.3.4"))) is False
    assert calls == []
    assert bot.sent == []


def test_network_error_is_swallowed():
    calls, bot = [], FakeBot()
    beacon = VisitorBeacon("token", "42", transport=_transport(calls, error=httpx.ConnectError), bot=bot)
    assert asyncio.run(beacon.notify(VisitorInfo(ip="1.2.3.4"))) is False
    assert len(calls) == 1
    assert bot.sent == []


def test_bad_status_is_swallowed():
    def handler(request):
        return httpx.Response(429, json={"error": True})
    bot = FakeBot()
    beacon = VisitorBeacon("token", "42", transport=httpx.MockTransport(handler), bot=bot)
    assert asyncio.run(beacon.notify(VisitorInfo(ip="1.2.3.4"))) is False
    assert bot.sent == []


def test_compose_message_defaults_and_escaping():
    text = compose_message({}, VisitorInfo(ip="1.2.3.4", user_agent="my_agent*1", platform="Linux"))
    assert "Unknown, Unknown" in text
    assert "1.2.3.4" in text
    assert "my\\_agent\\*1" in text
    assert "*Device:* Linux" in text


def test_guess_platform():
    assert guess_platform("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)") == "iPhone"
    assert guess_platform("Mozilla/5.0 (Linux; Android 14)") == "Android"
    assert guess_platform("Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0)") == "MacIntel"
    assert guess_platform("") == "Unknown"


def test_dispatch_runs_detached():
    calls, bot = [], FakeBot()
    beacon = VisitorBeacon("token", "42", transport=_transport(calls), bot=bot)
    thread = dispatch_in_background(beacon, VisitorInfo(ip="1.2.3.4"))
    assert thread.daemon
    thread.join(timeout=5)
    assert len(bot.sent) == 1


def test_from_env(monkeypatch):
    from syrupcalc import config
    monkeypatch.setattr(config, "VISITOR_BOT_TOKEN", "token")
    monkeypatch.setattr(config, "VISITOR_CHAT_ID", None)
    assert VisitorBeacon.from_env().configured is False
    monkeypatch.setattr(config, "VISITOR_CHAT_ID", "42")
    assert VisitorBeacon.from_env().configured is True
