import os


class Config:
    """Base configuration class with common settings."""

    # Kubernetes credentials
    KUBERNETES_CONFIG = os.getenv("KUBERNETES_CONFIG", "")
    KUBERNETES_MASTER_URL = os.getenv(
        "KUBERNETES_MASTER_URL", "https://kubernetes.default.svc"
    )
    API_REQUEST_TIMEOUT_SECONDS = int(os.getenv("API_REQUEST_TIMEOUT_SECONDS", "30"))

    # Elasticsearch custom resource
    ES_CRD_GROUP = os.getenv("ES_CRD_GROUP", "logging.openshift.io")
    ES_CRD_VERSION = os.getenv("ES_CRD_VERSION", "v1")
    ES_CRD_PLURAL = os.getenv("ES_CRD_PLURAL", "elasticsearches")
    ES_STATUS_SUBRESOURCE = os.getenv("ES_STATUS_SUBRESOURCE", "True").lower() == "true"

    # Health probe
    ES_CONTAINER_NAME = os.getenv("ES_CONTAINER_NAME", "elasticsearch")
    ES_HEALTH_QUERY = os.getenv("ES_HEALTH_QUERY", "_cluster/health?pretty=true")
    EXEC_TIMEOUT_SECONDS = int(os.getenv("EXEC_TIMEOUT_SECONDS", "30"))

    # Status update conflict retry
    STATUS_UPDATE_MAX_ATTEMPTS = int(os.getenv("STATUS_UPDATE_MAX_ATTEMPTS", "5"))
    STATUS_UPDATE_BACKOFF_SECONDS = float(
        os.getenv("STATUS_UPDATE_BACKOFF_SECONDS", "0.01")
    )
    STATUS_UPDATE_BACKOFF_FACTOR = float(
        os.getenv("STATUS_UPDATE_BACKOFF_FACTOR", "1.0")
    )
    STATUS_UPDATE_BACKOFF_JITTER = float(
        os.getenv("STATUS_UPDATE_BACKOFF_JITTER", "0.1")
    )

    # Logging settings
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    """Testing configuration."""

    TESTING = True
    DEBUG = True

    # Never talk to a real cluster from tests
    KUBERNETES_CONFIG = ""

    # No sleeping between conflict retries
    STATUS_UPDATE_BACKOFF_SECONDS = 0.0
    STATUS_UPDATE_BACKOFF_JITTER = 0.0


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    TESTING = False


# Configuration dictionary for easy selection
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": ProductionConfig,
}


def get_config(config_name=None):
    """Get configuration class based on environment.

    Args:
        config_name: Configuration name ('development', 'testing', 'production').
                    If None, uses OPERATOR_ENV environment variable or defaults to 'production'.

    Returns:
        Configuration class.
    """
    if config_name is None:
        config_name = os.getenv("OPERATOR_ENV", "production")

    config_class = config.get(config_name, ProductionConfig)
    return config_class
