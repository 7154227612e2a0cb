"""
Web 진입점

실행 방법:
    python -m web
"""

import uvicorn

from core.config.loader import get_settings

if __name__ == "__main__":
    web = get_settings().config.web
    uvicorn.run(
        "web.app:create_app",
        factory=True,
        host=web.host,
        port=web.port,
        reload=False,
    )
