import logging

import uvicorn

from gaxy.server import app
from gaxy.vars import LOG_LEVEL

logger = logging.getLogger("uvicorn.error")


def main() -> None:
    port = app.state.config.port
    # uvicorn.Config sets up the uvicorn loggers
    server_config = uvicorn.Config(app, host="0.0.0.0", port=port, log_level=LOG_LEVEL)
    logger.info(f"Listen on port {port}")
    uvicorn.Server(server_config).run()


if __name__ == "__main__":
    main()
