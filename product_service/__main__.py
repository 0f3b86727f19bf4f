# product_service/__main__.py

"""
Runs the Product Service API under uvicorn.

Usage:
    python -m product_service
    product-service

Host and port are read from HOST and PORT (defaults 0.0.0.0 and 8000).
"""
import os

import uvicorn


def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run(
        "product_service.main:app",
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "INFO").lower(),
    )


if __name__ == "__main__":
    main()
