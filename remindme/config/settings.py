# remindme/config/settings.py
# Runtime configuration for the reminder service

import os
import random
from typing import List
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Environment-backed settings for the application"""

    DATABASE = {
        'url': os.getenv('DATABASE_URL', 'sqlite:///./remindme.db'),
        'echo': os.getenv('DATABASE_ECHO', 'false').lower() == 'true',
        'auto_create_tables': os.getenv('AUTO_CREATE_TABLES', 'true').lower() == 'true',
    }

    SERVER = {
        'host': os.getenv('HOST', '0.0.0.0'),
        'port': int(os.getenv('PORT', '8000')),
        'reload': os.getenv('RELOAD', 'true').lower() == 'true',
    }

    SCHEDULER = {
        'timezone': os.getenv('SCHEDULER_TIMEZONE', 'UTC'),
        # A reminder missed while the server was down still fires if it is late by less than this
        'misfire_grace_seconds': int(os.getenv('MISFIRE_GRACE_SECONDS', 60 * 60)),
        'notification_retention_days': int(os.getenv('NOTIFICATION_RETENTION_DAYS', 30)),
        'cleanup_hour': int(os.getenv('NOTIFICATION_CLEANUP_HOUR', 0)),
    }

    LOGGING = {
        'level': os.getenv('LOG_LEVEL', 'INFO').upper(),
        'format': os.getenv('LOG_FORMAT', '%(asctime)s %(levelname)s [%(name)s] %(message)s'),
    }

    CORS = {
        'origins': os.getenv(
            'CORS_ALLOW_ORIGINS',
            'http://localhost:3000,http://localhost:3001,http://127.0.0.1:3000'
        ),
    }

    REMINDER_LIST = {
        'headers': [
            "Don't forget!",
            "Coming up",
            "On your plate",
            "Things to remember",
            "Your reminders",
        ],
    }

    @classmethod
    def get_cors_origins(cls) -> List[str]:
        """Parse the comma separated CORS origins"""
        raw = cls.CORS['origins'].strip()
        if raw in {"", "*"}:
            return ["*"]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    @classmethod
    def get_timezone(cls) -> ZoneInfo:
        return ZoneInfo(cls.SCHEDULER['timezone'])

    @classmethod
    def get_random_header(cls) -> str:
        """Pick the header text shown above the reminder list"""
        headers = cls.REMINDER_LIST['headers']
        return headers[random.randrange(len(headers))]
