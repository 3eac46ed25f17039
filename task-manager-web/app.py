import streamlit as st

from taskweb.context import drop_view, get_context
from taskweb.errors import AuthenticationError
from taskweb.session import Credentials
from taskweb.ui.notify import flush_notices
from taskweb.ui.theme import set_theme

DASHBOARD_PAGE = "pages/1_Mis_Tareas.py"

ctx = get_context()
set_theme(page_title=ctx.config.app_title, initial_sidebar_state="collapsed")
flush_notices()

if ctx.store.is_authenticated():
    st.switch_page(DASHBOARD_PAGE)

st.markdown('<div class="tw-login">', unsafe_allow_html=True)
st.title(f"✅ {ctx.config.app_title}")
st.caption("Ingresa tus credenciales para acceder al sistema")

with st.form("login-form"):
    email = st.text_input("Correo electrónico", placeholder="Ingresa tu correo")
    password = st.text_input("Contraseña", type="password", placeholder="Ingresa tu contraseña")
    submitted = st.form_submit_button("Iniciar sesión", use_container_width=True)

if submitted:
    if not email.strip() or not password:
        st.error("Correo y contraseña son obligatorios")
    else:
        try:
            with st.spinner("Verificando credenciales..."):
                ctx.store.login(Credentials(email=email.strip(), password=password))
        except AuthenticationError as exc:
            st.error(str(exc))
        else:
            drop_view()
            st.switch_page(DASHBOARD_PAGE)

st.markdown("</div>", unsafe_allow_html=True)
