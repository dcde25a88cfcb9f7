from .logging_config import get_logger

logger = get_logger(__name__)

from . import composition

# Create app using wiring.create_app() to avoid duplicating router/middleware registration
from .wiring import create_app

app = create_app()


@app.on_event("startup")
async def on_startup():
    # the teardown helper is kept on app.state so shutdown can stop the sweep task
    result = await composition.wire_app(app)
    app.state.teardown = result.teardown


@app.on_event("shutdown")
async def on_shutdown():
    teardown = getattr(app.state, "teardown", None)
    if teardown is not None:
        await teardown()
    logger.info("shutdown complete")


if __name__ == "__main__":
    import uvicorn

    from .deps.providers import get_settings

    settings = get_settings()
    uvicorn.run(
        "contactgate.main:app", host=settings.server_host, port=settings.server_port, reload=True
    )
