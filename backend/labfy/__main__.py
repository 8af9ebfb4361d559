import uvicorn

from labfy.core.config import settings


def main() -> None:
    uvicorn.run("labfy.main:app", host="0.0.0.0", port=8000, reload=settings.debug)


if __name__ == "__main__":
    main()
