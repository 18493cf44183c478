"""Runtime configuration.

Every setting is read from ``os.environ`` at call time so tests can patch
the environment without reloading modules.
"""

import os

SERVICE_NAME = "founder-signal-worker"

DEFAULT_HN_API_BASE = "https://hacker-news.firebaseio.com/v0"
DEFAULT_HN_ITEM_BASE = "https://news.ycombinator.com"
DEFAULT_PROVIDER = "hackernews"

DEFAULT_LLM_API_URL = "https://api.anthropic.com/v1/messages"
DEFAULT_LLM_MODEL = "claude-sonnet-4-5"
DEFAULT_LLM_MAX_TOKENS = 2000
LLM_API_VERSION = "2023-06-01"

DEFAULT_FETCH_TIMEOUT = 10.0


def get_hn_api_base() -> str:
    return os.environ.get("HN_API_BASE", DEFAULT_HN_API_BASE).rstrip("/")


def get_hn_item_base() -> str:
    return os.environ.get("HN_ITEM_BASE", DEFAULT_HN_ITEM_BASE).rstrip("/")


def get_provider_name() -> str:
    return os.environ.get("SIGNAL_PROVIDER", DEFAULT_PROVIDER).strip().lower()


def get_llm_api_key() -> str | None:
    return os.environ.get("LLM_API_KEY") or os.environ.get("ANTHROPIC_API_KEY")


def get_llm_api_url() -> str:
    return os.environ.get("LLM_API_URL", DEFAULT_LLM_API_URL)


def get_llm_model() -> str:
    return os.environ.get("LLM_MODEL", DEFAULT_LLM_MODEL)


def get_llm_max_tokens() -> int:
    try:
        return int(os.environ.get("LLM_MAX_TOKENS", DEFAULT_LLM_MAX_TOKENS))
    except ValueError:
        return DEFAULT_LLM_MAX_TOKENS


def get_fetch_timeout() -> float:
    try:
        return float(os.environ.get("FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT))
    except ValueError:
        return DEFAULT_FETCH_TIMEOUT


def get_log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").upper()


def get_host() -> str:
    return os.environ.get("HOST", "0.0.0.0")


def get_port() -> int:
    try:
        return int(os.environ.get("PORT", 8787))
    except ValueError:
        return 8787
