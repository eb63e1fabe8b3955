from __future__ import annotations

import streamlit as st
from supabase import create_client, Client

from settings import require_cfg


@st.cache_resource(show_spinner=False)
def get_client() -> Client:
    # No auth here, so one client can serve every tab
    url = require_cfg("SUPABASE_URL")
    anon = require_cfg("SUPABASE_ANON_KEY")
    return create_client(url, anon)
