"""Open Graph image proxy web server."""

import logging

import uvicorn
from ogimage.config import settings


def main():
    """Run the web server."""
    from ogimage.web.app import create_app

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = create_app()
    uvicorn.run(
        app,
        host=settings.web_host,
        port=settings.web_port,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
