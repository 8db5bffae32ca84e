"""Server entrypoint."""

import os

import uvicorn


def main() -> None:
    """Start the uvicorn server."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    workers = int(os.getenv("UVICORN_WORKERS", "1"))
    uvicorn.run("proposal_maker.api.main:app", host=host, port=port, workers=workers)


if __name__ == "__main__":
    main()
