from logging.config import dictConfig

def configure_logging(level: str = "INFO"):
    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s: %(name)s: %(message)s"
            },
            "error": {
                "format": "%(asctime)s %(levelname)s: %(name)s: %(funcName)s: %(message)s"
            }
        },
        "handlers": {
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
            },
            "error": {
                "formatter": "error",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "level": "ERROR"
            }
        },
        "loggers": {
            "uvicorn": {
                "handlers": ["default"],
                "level": "INFO"
            },
            "uvicorn.error": {
                "handlers": ["error"],
                "level": "ERROR"
            },
            "fastapi": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False
            },
            "sqlalchemy": {
                "handlers": ["error"],
                "level": "ERROR",
                "propagate": False
            },
            "app": { # Scheduler logger, shared by routes, crud and the recurrence engine
                "handlers": ["default"],
                "level": level,
                "propagate": False
            }
        },
        "root": {
            "handlers": ["default"],
            "level": "INFO"
        }
    }
    dictConfig(log_config)
