# syrupcalc/web_server.py
"""
Простой HTTP сервер: страница калькулятора, JSON API и health check.
При первом открытии страницы отправляет уведомление о посетителе (один раз за процесс).
"""
import logging
import json
import threading
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlparse

from syrupcalc import config
from syrupcalc.beacon import VisitorBeacon, VisitorInfo, dispatch_in_background
from syrupcalc.rendering import build_rows, render_html, row_to_dict
from syrupcalc.session import InputState
from syrupcalc.utils import parse_number


def state_from_query(query: Dict[str, list]) -> InputState:
    """mode=weight|age, weight=..., age=... -> InputState. Без mode режим угадываем по переданному полю."""
    def first(key: str) -> Optional[str]:
        values = query.get(key)
        return values[0] if values else None

    mode = first("mode")
    if mode not in ("weight", "age"):
        mode = "age" if first("age") is not None and first("weight") is None else "weight"
    state = InputState(mode=mode)
    state.set_value(parse_number(first(mode)))
    return state


class SyrupCalcServer(HTTPServer):
    """HTTPServer + флаг «посетитель уже отправлен» (только в памяти процесса)."""

    def __init__(self, server_address, beacon: Optional[VisitorBeacon] = None):
        super().__init__(server_address, SyrupCalcRequestHandler)
        self.beacon = beacon
        self._visitor_notified = False
        self._notify_lock = threading.Lock()

    def notify_visitor_once(self, visitor: VisitorInfo) -> Optional[threading.Thread]:
        if self.beacon is None:
            return None
        with self._notify_lock:
            if self._visitor_notified:
                return None
            self._visitor_notified = True
        logging.info(f"📨 [WEB] Первый посетитель: {visitor.ip}")
        return dispatch_in_background(self.beacon, visitor)


class SyrupCalcRequestHandler(BaseHTTPRequestHandler):
    """HTTP обработчик страницы калькулятора."""

    server: SyrupCalcServer

    def _send(self, status: int, body: bytes, content_type: str) -> None:
        self.send_response(status)
        self.send_header('Content-type', content_type)
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _send_json(self, status: int, payload: Dict[str, Any]) -> None:
        self._send(status, json.dumps(payload, ensure_ascii=False).encode('utf-8'), 'application/json; charset=utf-8')

    def _visitor(self) -> VisitorInfo:
        forwarded = self.headers.get('X-Forwarded-For', '')
        ip = forwarded.split(',')[0].strip() or self.client_address[0]
        platform = (self.headers.get('Sec-CH-UA-Platform') or '').strip('"') or None
        return VisitorInfo(ip=ip, user_agent=self.headers.get('User-Agent', ''), platform=platform)

    def do_GET(self):
        """Обработать GET запрос."""
        try:
            url = urlparse(self.path)
            query = parse_qs(url.query)

            if url.path == '/health':
                self._send_json(200, {"status": "ok", "service": "syrupcalc"})
            elif url.path == '/api/doses':
                state = state_from_query(query)
                rows = build_rows(state.weight_kg)
                self._send_json(200, {
                    "mode": state.mode,
                    "weight_kg": state.weight_kg,
                    "age_years": state.age_years,
                    "drugs": [row_to_dict(r) for r in rows],
                })
            elif url.path == '/':
                state = state_from_query(query)
                self.server.notify_visitor_once(self._visitor())
                page = render_html(state)
                self._send(200, page.encode('utf-8'), 'text/html; charset=utf-8')
            else:
                self._send_json(404, {"error": "Not found"})

        except Exception as e:
            logging.error(f"❌ [WEB] Ошибка при обработке HTTP запроса: {e}", exc_info=True)
            self._send_json(500, {"status": "error", "message": "Internal server error"})

    def log_message(self, format, *args):
        """Переопределяем логирование для использования нашего logger."""
        logging.debug(f"[HTTP] {format % args}")


def run_web_server(host: str = '0.0.0.0', port: int = 8080, beacon: Optional[VisitorBeacon] = None):
    """
    Запустить HTTP сервер страницы калькулятора.

    Args:
        host: Хост для прослушивания (по умолчанию 0.0.0.0)
        port: Порт для прослушивания (по умолчанию 8080)
        beacon: Уведомления о посетителях; None — взять настройки из окружения
    """
    if beacon is None:
        beacon = VisitorBeacon.from_env()
    if not beacon.configured:
        logging.warning("⚠️ [WEB] Уведомления о посетителях не настроены (VISITOR_BOT_TOKEN / VISITOR_CHAT_ID)")

    server = SyrupCalcServer((host, port), beacon=beacon)
    logging.info(f"✅ [WEB] Сервер запущен на http://{host}:{port}/")
    logging.info(f"💡 [WEB] Health check: http://{host}:{port}/health")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logging.info("🛑 [WEB] Остановка сервера...")
    finally:
        server.server_close()


def main():
    logging.basicConfig(format=config.LOG_FORMAT, level=logging.INFO)
    run_web_server(host=config.WEB_HOST, port=config.WEB_PORT)


if __name__ == "__main__":
    main()
