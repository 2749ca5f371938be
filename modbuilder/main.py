from modbuilder.api.main import app


def serve() -> None:
    import logging
    import uvicorn

    from modbuilder.core.config.settings import log_level, server_host, server_port

    logging.basicConfig(level=log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host=server_host(), port=server_port())


if __name__ == "__main__":
    serve()
