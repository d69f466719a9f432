import logging

from flask import Flask

from .extensions import socketio, limiter
from .globals import log_event

# Получаем логгер
logger = logging.getLogger(__name__)


def _configure_logging(app):
    """
    Настраивает файловый логгер пакета 'ur_game'.
    Логгеры модулей (ur_game.*) пишут в него через propagate.
    """
    package_logger = logging.getLogger('ur_game')

    # Повторный create_app (тесты) не должен плодить хендлеры
    for handler in list(package_logger.handlers):
        if getattr(handler, '_ur_game_file_handler', False):
            package_logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(app.config['LOG_FILE'], encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s'))
    file_handler._ur_game_file_handler = True

    package_logger.addHandler(file_handler)
    package_logger.setLevel(logging.DEBUG if app.debug else logging.INFO)
    logger.info("Файловый логгер настроен.")


def _init_extensions(app):
    """Инициализирует расширения Flask."""
    socketio.init_app(app)
    limiter.init_app(app)
    logger.info("Расширения Flask (SocketIO, Limiter) инициализированы.")


def _init_services(app):
    """Инициализирует и внедряет сервисы приложения."""

    # Импорты сервисов здесь, чтобы избежать циклических зависимостей
    from .services.game_service import GameService
    from .services.game_registry import GameRegistry
    from .game_core.ai_controller import AIController

    ai_controller = AIController(think_delay=app.config['AI_THINK_DELAY_SEC'])
    registry = GameRegistry(log_event_func=log_event)

    game_service = GameService(
        registry=registry,
        ai_controller=ai_controller,
        log_event=log_event,
        config=app.config,
    )

    # Прикрепляем главный сервис к экземпляру приложения
    app.game_service = game_service
    logger.info("Игровые сервисы (GameService, Registry, AIController) инициализированы.")


def _register_blueprints(app):
    """Регистрирует все маршруты API (Blueprints)."""
    from .api.main_routes import bp as main_bp
    app.register_blueprint(main_bp)

    logger.info("Blueprints (маршруты API) зарегистрированы.")


def _register_socketio_handlers():
    """
    Импортирует обработчики SocketIO для их регистрации.
    """
    # Этот импорт регистрирует обработчики в экземпляре socketio
    from .sockets import connection_handlers  # noqa: F401
    from .sockets import game_handlers  # noqa: F401
    logger.info("Обработчики SocketIO (connection, game) зарегистрированы.")


def create_app(config_object=None):
    """
    Фабрика приложений (Паттерн Application Factory).
    config_object - класс/объект конфигурации поверх базового (для тестов).
    """

    app = Flask(
        __name__,
        instance_relative_config=True,
    )

    # 1. Загрузка конфигурации
    app.config.from_object('ur_game.config.Config')
    app.config.from_pyfile('config.py', silent=True)
    if config_object is not None:
        app.config.from_object(config_object)

    # 2. Настройка логирования
    _configure_logging(app)

    # 3. Инициализация расширений
    _init_extensions(app)

    # 4. Инициализация сервисов
    _init_services(app)

    # 5. Регистрация Blueprints (маршрутов API)
    _register_blueprints(app)

    # 6. Регистрация обработчиков SocketIO
    _register_socketio_handlers()

    logger.info("Приложение 'ur-game-server' создано.")
    logger.info(f"Путь к логам: {app.config['LOG_FILE']}")

    return app, socketio
