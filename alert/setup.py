def run():
    """
    Run before every entry point:
        management commands
        alembic
        ipython shell
        pytest
    """
    from loguru import logger

    from alert.common.logs import configure_logging

    configure_logging()
    configure_models()

    logger.info('application setup complete ✅')


def configure_models():
    """
    When using declarative we need to run this for our entry points
    to have context on our models, every table has to be registered
    on the metadata before alembic compares or creates anything
    """
    from alert.common.model import import_model_modules

    import_model_modules()
