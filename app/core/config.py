import os
from typing import Optional

class Settings:
    # Rendering proxy
    SCRAPEOPS_API_KEY: Optional[str] = os.getenv("SCRAPEOPS_API_KEY")
    SCRAPEOPS_BASE_URL: str = os.getenv("SCRAPEOPS_BASE_URL", "https://proxy.scrapeops.io/v1/")
    SCRAPEOPS_COUNTRY: Optional[str] = os.getenv("SCRAPEOPS_COUNTRY") or None

    # Development
    USE_MOCK: bool = os.getenv("USE_MOCK", "0").lower() in ("1", "true", "yes")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Scraping
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "60"))
    USER_AGENT: str = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
    )

    # Batch workers
    DEFAULT_CONCURRENCY: int = int(os.getenv("DEFAULT_CONCURRENCY", "3"))
    MAX_CONCURRENCY: int = 10

    # Display name used by the variant workflow when the page has none
    DEFAULT_PRODUCT_NAME: str = os.getenv("DEFAULT_PRODUCT_NAME", "Sephora Product")

settings = Settings()
