# syrupcalc/beacon.py
"""
Уведомление администратору о посетителе веб-страницы.

Один GET в сервис геолокации по IP и одно сообщение через Telegram Bot API.
Ничего не возвращает в интерфейс: любые ошибки только логируются.
"""
import asyncio
import logging
import threading
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel
from telegram import Bot
from telegram.constants import ParseMode
from telegram.helpers import escape_markdown

from syrupcalc import config


class VisitorInfo(BaseModel):
    ip: Optional[str] = None
    user_agent: str = ""
    platform: Optional[str] = None


def guess_platform(user_agent: str) -> str:
    """Грубая оценка платформы по User-Agent (аналог navigator.platform)."""
    ua = (user_agent or "").lower()
    if "iphone" in ua:
        return "iPhone"
    if "ipad" in ua:
        return "iPad"
    if "android" in ua:
        return "Android"
    if "windows" in ua:
        return "Win32"
    if "mac os" in ua or "macintosh" in ua:
        return "MacIntel"
    if "linux" in ua:
        return "Linux"
    return "Unknown"


def _md(value: Any) -> str:
    return escape_markdown(str(value), version=1)


def compose_message(location: Dict[str, Any], visitor: VisitorInfo) -> str:
    city = location.get("city") or "Unknown"
    country = location.get("country_name") or "Unknown"
    ip = location.get("ip") or visitor.ip or "Unknown"
    platform = visitor.platform or guess_platform(visitor.user_agent)
    return (
        "🚨 *New Website Visitor!*\n\n"
        f"📍 *Location:* {_md(city)}, {_md(country)}\n"
        f"🌐 *IP Address:* {_md(ip)}\n"
        f"📱 *Device:* {_md(platform)}\n"
        f"🔍 *Browser:* {_md(visitor.user_agent or 'Unknown')}"
    )


class VisitorBeacon:
    """Отправка уведомления. Состояние «уже отправили» хранит вызывающий код."""

    def __init__(
        self,
        bot_token: Optional[str],
        chat_id: Optional[str],
        ipapi_url: str = "https://ipapi.co",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        bot: Optional[Any] = None,
    ):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.ipapi_url = ipapi_url.rstrip("/")
        self._transport = transport
        self._bot = bot

    @classmethod
    def from_env(cls) -> "VisitorBeacon":
        return cls(config.VISITOR_BOT_TOKEN, config.VISITOR_CHAT_ID, config.IPAPI_URL)

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    async def lookup_location(self, ip: Optional[str]) -> Dict[str, Any]:
        url = f"{self.ipapi_url}/{ip}/json/" if ip else f"{self.ipapi_url}/json/"
        async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.json()

    async def _send(self, text: str) -> None:
        if self._bot is not None:
            await self._bot.send_message(chat_id=self.chat_id, text=text, parse_mode=ParseMode.MARKDOWN)
            return
        async with Bot(self.bot_token) as bot:
            await bot.send_message(chat_id=self.chat_id, text=text, parse_mode=ParseMode.MARKDOWN)

    async def notify(self, visitor: VisitorInfo) -> bool:
        """True — сообщение ушло. Исключения наружу не выпускаем."""
        if not self.configured:
            logging.warning("⚠️ [BEACON] VISITOR_BOT_TOKEN или VISITOR_CHAT_ID не заданы, уведомление пропущено")
            return False
        try:
            location = await self.lookup_location(visitor.ip)
            await self._send(compose_message(location, visitor))
        except Exception as e:
            logging.error(f"❌ [BEACON] Не удалось отправить уведомление: {e}", exc_info=True)
            return False
        logging.info("✅ [BEACON] Администратор уведомлён")
        return True


def dispatch_in_background(beacon: VisitorBeacon, visitor: VisitorInfo) -> threading.Thread:
    """Запустить notify в отдельном потоке и сразу вернуться. Результат никуда не передаётся."""
    thread = threading.Thread(
        target=asyncio.run,
        args=(beacon.notify(visitor),),
        daemon=True,
        name="VisitorBeacon",
    )
    thread.start()
    return thread
