"""Web app configuration for the Family Tree API."""

from family_tree.config import settings


class Config:
    """Base configuration."""

    # App settings
    DEBUG = True
    TESTING = False

    # CORS settings
    CORS_ORIGINS = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev port
    ]

    # Database path
    DB_PATH = settings.db_path

    # Graph engine settings
    CONSANGUINITY_RADIUS = settings.consanguinity_radius
    TRAVERSAL_NODE_LIMIT = settings.traversal_node_limit
    TRAVERSAL_TIMEOUT = settings.traversal_timeout


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""

    DEBUG = False
    TESTING = True
    TRAVERSAL_TIMEOUT = None


# Config factory
def get_config(env: str = "development") -> Config:
    """Get configuration based on environment.

    Args:
        env: Environment name (development, production, testing)

    Returns:
        Configuration object
    """
    configs = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }
    return configs.get(env, DevelopmentConfig)()
