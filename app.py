import logging

import streamlit as st
from app_shell import run_app

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

st.set_page_config(page_title="The Coffee Corner", page_icon="☕", layout="wide")

run_app()
