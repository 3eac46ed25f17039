from taskweb.ui import theme


def test_set_theme():
    try:
        theme.set_theme(page_title="Mis Tareas", page_icon="📋")
    except Exception as e:
        assert False, f"set_theme raised an exception: {e}"
