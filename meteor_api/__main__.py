import uvicorn

from . import config


def main() -> None:
    uvicorn.run("meteor_api.app:app", host=config.server_host(), port=config.server_port())


if __name__ == "__main__":
    main()
