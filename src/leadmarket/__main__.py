"""
Run the marketplace API with uvicorn
"""
import uvicorn

from leadmarket.core.config import settings
from leadmarket.utils.logging import app_logger


def main() -> None:
    app_logger.info(
        f"🌐 [cyan]Serving on[/cyan] http://{settings.server.host}:{settings.server.port}"
    )
    uvicorn.run(
        "leadmarket.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
