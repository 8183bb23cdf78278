"""Run the auth API with uvicorn, in the foreground or on a background thread."""

import threading
import time

import uvicorn

from .config import settings
from .logs import get_logger, setup_logging

log = get_logger(__name__)

STARTUP_TIMEOUT_SECONDS = 10.0


class RunningServer:
    """Handle on a uvicorn server serving on a background thread."""

    def __init__(self, server: uvicorn.Server, thread: threading.Thread, host: str, port: int):
        self._server = server
        self._thread = thread
        self.host = host
        self.port = port

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}/api"

    def close(self) -> None:
        log.info("stopping_server", port=self.port)
        self._server.should_exit = True
        self._thread.join()


def start_server(port: int | None = None, host: str | None = None) -> RunningServer:
    """Start the app on a daemon thread and block until it accepts requests."""
    host = host or settings.app_host
    port = port if port is not None else settings.app_port
    config = uvicorn.Config("authapi.main:app", host=host, port=port, log_level="warning", lifespan="on")
    server = uvicorn.Server(config)
    thread = threading.Thread(target=server.run, name=f"authapi-{port}", daemon=True)
    thread.start()

    deadline = time.monotonic() + STARTUP_TIMEOUT_SECONDS
    while not server.started:
        if not thread.is_alive() or time.monotonic() > deadline:
            server.should_exit = True
            if thread.is_alive():
                thread.join(timeout=STARTUP_TIMEOUT_SECONDS)
            raise RuntimeError(f"auth API failed to start on {host}:{port}")
        time.sleep(0.05)
    log.info("server_started", host=host, port=port)
    return RunningServer(server, thread, host, port)


def main() -> None:
    setup_logging()
    log.info("starting_api", host=settings.app_host, port=settings.app_port, env=settings.app_env)
    uvicorn.run("authapi.main:app", host=settings.app_host, port=settings.app_port)


if __name__ == "__main__":
    main()
