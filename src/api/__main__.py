# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Run the API server with uvicorn.

Usage:
    python -m src.api
"""

import uvicorn

from src.core.config import get_settings


def main() -> None:
    """Start uvicorn with the configured host, port and workers."""
    api = get_settings().api
    uvicorn.run(
        "src.api.app:create_app",
        factory=True,
        host=api.host,
        port=api.port,
        workers=api.workers,
        reload=api.reload,
    )


if __name__ == "__main__":
    main()
