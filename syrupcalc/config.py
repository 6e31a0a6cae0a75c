# syrupcalc/config.py
"""
Настройки из переменных окружения (.env подхватывается автоматически).
"""
import os
from dotenv import load_dotenv

# Загружаем переменные окружения из .env файла
load_dotenv()

# Токен бота-калькулятора
TELEGRAM_BOT_TOKEN = os.getenv('TELEGRAM_BOT_TOKEN')

# Уведомления о посетителях веб-страницы (отдельный бот и чат администратора)
VISITOR_BOT_TOKEN = os.getenv('VISITOR_BOT_TOKEN')
VISITOR_CHAT_ID = os.getenv('VISITOR_CHAT_ID')

# Сервис геолокации по IP
IPAPI_URL = os.getenv('IPAPI_URL', 'https://ipapi.co').rstrip('/')

# Веб-страница
WEB_HOST = os.getenv('WEB_HOST', '0.0.0.0')
WEB_PORT = int(os.getenv('WEB_PORT', '8080'))

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
