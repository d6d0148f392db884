"""
Bot settings, read from the environment (and a local .env file).
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

VERSION = "0.2.0"

# --- Discord ---
COMMAND_PREFIX = os.getenv("RENAMER_COMMAND_PREFIX", "~")

# Guild to sync slash commands to on start-up (instant), instead of globally.
_sync_guild = os.getenv("RENAMER_SYNC_GUILD_ID")
SYNC_GUILD_ID: Optional[int] = int(_sync_guild) if _sync_guild else None

# How many members a /rename search may return before it counts as ambiguous.
# Below 2 an ambiguous search would look unique; Discord caps member queries at 100.
MIN_SEARCH_LIMIT = 2
MAX_SEARCH_LIMIT = 100


def clamp_search_limit(limit: int) -> int:
    return max(MIN_SEARCH_LIMIT, min(limit, MAX_SEARCH_LIMIT))


MEMBER_SEARCH_LIMIT = clamp_search_limit(int(os.getenv("RENAMER_MEMBER_SEARCH_LIMIT", "5")))

# --- Storage ---
DB_PATH = os.getenv("RENAMER_DB_PATH", "db/renamer_roles.db")

# --- Logging ---
LOG_FILE = os.getenv("RENAMER_LOG_FILE", "discord.log")
LOG_LEVEL = os.getenv("RENAMER_LOG_LEVEL", "INFO").upper()


def get_token() -> str:
    """Returns the bot token, failing loudly when it is not configured."""
    token = os.getenv("DISCORD_TOKEN")
    if not token:
        raise RuntimeError("DISCORD_TOKEN is not set. Add it to your environment or .env file.")
    return token
