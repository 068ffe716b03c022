import logging

from .app import AppContext, MainWindow, create_qt_app
from .config import configure_logging, load_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    configure_logging(settings)
    app = create_qt_app()
    ctx = AppContext.create(settings)

    # Sesión persistida: se entra directamente sin login
    session = ctx.session_store.restore()
    if session is None:
        login = ctx.login_dialog()
        if not login.exec() or login.session is None:
            return
        session = login.session

    logger.info("Iniciando RNDC Admin contra %s", settings.api_base_url)
    window = MainWindow(ctx, session)
    window.show()
    try:
        app.exec()
    finally:
        ctx.runner.wait()


if __name__ == "__main__":
    main()
