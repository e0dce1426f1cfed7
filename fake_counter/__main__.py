"""Run the endpoint with ``python -m fake_counter``."""
import uvicorn

from .config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("fake_counter.main:app", host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    main()
