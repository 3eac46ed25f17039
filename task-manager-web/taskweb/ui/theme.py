import os

import streamlit as st
from streamlit.errors import StreamlitAPIException


def set_theme(
    page_title: str = "Gestor de Tareas",
    page_icon: str = "✅",
    layout: str = "wide",
    initial_sidebar_state: str = "expanded",
):
    """Configure the Streamlit page and inject the shared CSS.

    Parameters allow per-page override of title/icon. Safe to call once at the
    top of each page; Streamlit ignores repeated page configs but the CSS is
    (re)injected on every run.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except StreamlitAPIException:
        # set_page_config can only be called once per run; ignore if already set.
        pass

    theme_file = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "..", "assets", "theme.css")

    try:
        with open(theme_file, "r", encoding="utf-8") as f:
            css = f.read()
            st.markdown(f"<style>{css}</style>", unsafe_allow_html=True)
    except FileNotFoundError:
        st.error(f"Theme file not found at {theme_file}. Please check the file path.")
