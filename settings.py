import logging
import os

import streamlit as st

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("memory", "file", "supabase")


def _secret(key: str):
    try:
        if key in st.secrets:
            return str(st.secrets[key])
    except Exception:
        # No secrets.toml (tests, plain scripts): fall through to env vars
        return None
    return None


def get_cfg(key: str, default: str | None = None) -> str | None:
    v = _secret(key)
    if v:
        return v
    v = os.getenv(key)
    if v is not None and v.strip() != "":
        return v.strip()
    return default


def require_cfg(key: str) -> str:
    v = get_cfg(key)
    if not v:
        raise RuntimeError(f"Missing config: {key}. Add it to Streamlit secrets or env vars.")
    return v


def storage_backend() -> str:
    backend = (get_cfg("CART_STORAGE_BACKEND", "memory") or "memory").lower()
    if backend not in STORAGE_BACKENDS:
        logger.warning("Unknown CART_STORAGE_BACKEND %r, using memory", backend)
        return "memory"
    return backend


def storage_key() -> str:
    return get_cfg("CART_STORAGE_KEY", "cart")


def storage_path() -> str:
    return get_cfg("CART_STORAGE_PATH", ".cart_storage.json")


def profile_id() -> str:
    return get_cfg("CART_PROFILE_ID", "default")


def shop_timezone() -> str:
    return get_cfg("SHOP_TIMEZONE", "Europe/London")
