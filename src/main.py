import logging
import signal
import sys
import threading
from typing import Optional

from app_config import (
    AppConfig,
    AppConfigurationError,
    default_app_config,
    load_app_config,
    resolve_config_path,
)
from runtime import RuntimeBootstrap, RuntimeEngine
from runtime.contracts import SoundPlayerLike
from server import ServerConfigurationError, StateServer, StateServerConfig


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("pomodoro_widget")


def setup_signal_handlers(stop_event: threading.Event, logger: logging.Logger) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        del frame
        logger.info("Signal %s received, stopping.", signal.Signals(signum).name)
        stop_event.set()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def load_config(logger: logging.Logger, config_path: Optional[str] = None) -> AppConfig:
    path = resolve_config_path(config_path)
    if not path.exists() and config_path is None:
        logger.info("No config file at %s, using defaults", path)
        return default_app_config()
    app_config = load_app_config(str(path))
    logger.info("Loaded runtime config: %s", path)
    return app_config


def build_sound_player(
    app_config: AppConfig,
    logger: logging.Logger,
) -> Optional[SoundPlayerLike]:
    settings = app_config.sound
    if not settings.enabled or not (settings.work_sound or settings.break_sound):
        return None
    try:
        # sounddevice and soundfile load PortAudio and libsndfile at import time.
        from sound.player import SoundDevicePlayer
    except (ImportError, OSError) as error:
        logger.warning("Sound playback unavailable: %s", error)
        return None
    return SoundDevicePlayer(
        output_device_index=settings.output_device,
        logger=logging.getLogger("sound"),
    )


def build_state_server(
    app_config: AppConfig,
    logger: logging.Logger,
) -> Optional[StateServer]:
    try:
        config = StateServerConfig.from_settings(app_config.state_server)
    except ServerConfigurationError as error:
        logger.error("State server configuration error: %s", error)
        logger.warning("Continuing without state server.")
        return None

    if not config.enabled:
        return None

    server = StateServer(config=config, logger=logging.getLogger("state_server"))
    try:
        logger.info("Starting state server...")
        server.start(timeout_seconds=5.0)
    except RuntimeError as error:
        logger.error("State server startup failed: %s", error)
        logger.warning("Continuing without state server.")
        return None
    return server


def main(argv: Optional[list[str]] = None) -> int:
    """Run the pomodoro timer host until interrupted."""
    args = sys.argv[1:] if argv is None else argv
    logger = setup_logging(level=logging.INFO)

    try:
        app_config = load_config(logger, args[0] if args else None)
    except AppConfigurationError as error:
        logger.error("App configuration error: %s", error)
        return 1

    state_server = build_state_server(app_config, logger)
    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logging.getLogger("runtime"),
            app_config=app_config,
            sound_player=build_sound_player(app_config, logger),
            ui_server=state_server,
        )
    )

    stop_event = threading.Event()
    setup_signal_handlers(stop_event, logger)
    try:
        return engine.run(stop_event)
    finally:
        if state_server is not None:
            logger.info("Stopping state server...")
            state_server.stop(timeout_seconds=5.0)


if __name__ == "__main__":
    raise SystemExit(main())
