# Knowledge Hub API server

import uvicorn

from knowledge_hub.config import config


def main():
    """Serve the API on the configured host and port (PORT, default 3000)"""
    uvicorn.run(
        "knowledge_hub.api.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    main()
