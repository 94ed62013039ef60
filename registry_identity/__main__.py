"""Run the API with uvicorn: ``python -m registry_identity``."""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "registry_identity.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        log_config=None,  # logging is configured by the app lifespan
    )


if __name__ == "__main__":
    main()
