from __future__ import annotations

from typing import Iterable, Optional

import streamlit as st

from taskweb.views.common import Notice

_QUEUE_KEY = "_taskweb_notices"


def queue_notice(notice: Optional[Notice]) -> None:
    """Keep a notice for the next script run (actions are followed by st.rerun)."""
    if notice is None:
        return
    st.session_state.setdefault(_QUEUE_KEY, []).append(notice)


def show_notice(notice: Optional[Notice]) -> None:
    if notice is None:
        return
    text = f"**{notice.title}**" + (f": {notice.message}" if notice.message else "")
    if notice.ok:
        st.toast(text, icon="✅")
    else:
        st.toast(text, icon="⚠️")


def flush_notices(extra: Iterable[Optional[Notice]] = ()) -> bool:
    """Render queued notices (and ``extra``). Returns True if any reported an expired session."""
    pending = list(st.session_state.pop(_QUEUE_KEY, []) or [])
    pending.extend(n for n in extra if n is not None)
    expired = False
    for notice in pending:
        show_notice(notice)
        expired = expired or notice.session_expired
    return expired
