import datetime
import uuid
import pytz
from chore_wars import config


def get_now_iso() -> str:
    return datetime.datetime.now(pytz.timezone(config.TIMEZONE)).isoformat()


def new_id() -> str:
    """Entity identifier (uuid4 hex)"""
    return uuid.uuid4().hex
