"""
Application configuration settings loaded from config.yaml
"""
import os
import yaml
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, field_validator


class DatabasePoolConfig(BaseModel):
    """Database connection pool configuration"""
    size: int = 10  # Number of connections to maintain
    max_overflow: int = 20  # Maximum overflow connections
    timeout: int = 30  # Seconds to wait for a connection
    recycle: int = 3600  # Seconds before recycling a connection
    echo: bool = False  # Log SQL queries


class DatabaseConfig(BaseModel):
    """Database configuration"""
    server: str = "localhost"
    user: str = "postgres"
    password: str = ""
    db: str = "leadmarket"
    port: str = "5432"
    schema: str = "public"  # PostgreSQL schema name
    url_override: Optional[str] = None  # Full SQLAlchemy URL, e.g. "sqlite:///./leadmarket.db"
    pool: DatabasePoolConfig = DatabasePoolConfig()

    @property
    def url(self) -> str:
        """Construct database URL"""
        if self.url_override:
            return self.url_override
        return f"postgresql://{self.user}:{self.password}@{self.server}:{self.port}/{self.db}"

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class BillingConfig(BaseModel):
    """Hosted billing functions (checkout sessions and invoices)"""
    base_url: str
    api_key: Optional[str] = None
    timeout: int = 30
    checkout_function: str = "create-checkout-session"
    invoices_function: str = "get-stripe-invoices"


class MarketplaceConfig(BaseModel):
    """Lead marketplace rules"""
    purchase_limit: int = 5  # Maximum distinct purchasers per lead
    low_credit_threshold: int = 5  # Balance under this is reported as low


class ServerConfig(BaseModel):
    """ASGI server used by the `leadmarket` command"""
    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = False


class CreditPackageConfig(BaseModel):
    """A purchasable bundle of credits"""
    id: str
    credits: int
    price: float  # EUR


class Settings(BaseModel):
    """Application settings loaded from config.yaml"""

    # Project settings
    project_name: str = "Lead Marketplace API"
    version: str = "1.0.0"
    description: str = "Credit-based lead marketplace for marketers and administrators"
    api_v1_str: str = "/api/v1"

    # Database settings
    database: DatabaseConfig = DatabaseConfig()

    @property
    def DATABASE_URL(self) -> str:
        """Construct database URL"""
        return self.database.url

    # Billing function settings
    billing: BillingConfig

    # Server settings
    server: ServerConfig = ServerConfig()

    # Marketplace rules
    marketplace: MarketplaceConfig = MarketplaceConfig()

    credit_packages: List[CreditPackageConfig] = [
        CreditPackageConfig(id="basic", credits=10, price=25),
        CreditPackageConfig(id="pro", credits=25, price=50),
        CreditPackageConfig(id="business", credits=50, price=90),
    ]

    # CORS settings
    backend_cors_origins: List[str] = []

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, list):
            return v
        return []

    # Logging
    log_level: str = "INFO"

    class Config:
        case_sensitive = False


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config.yaml file. If None, uses LEADMARKET_CONFIG
                    when set, otherwise looks for config.yaml in:
                    1. Current directory
                    2. Project root (src/../config.yaml)

    Returns:
        Settings: Loaded and validated settings
    """
    if config_path is None:
        config_path = os.environ.get("LEADMARKET_CONFIG")

    if config_path is None:
        # Try current directory first
        current_dir = Path.cwd() / "config.yaml"
        if current_dir.exists():
            config_path = str(current_dir)
        else:
            # Try project root (assuming we're in src/leadmarket/core/)
            project_root = Path(__file__).parent.parent.parent.parent / "config.yaml"
            if project_root.exists():
                config_path = str(project_root)
            else:
                raise FileNotFoundError(
                    "config.yaml not found. Please create config.yaml in the project root."
                )

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file, "r") as f:
        config_data = yaml.safe_load(f)

    if config_data is None:
        raise ValueError("Configuration file is empty or invalid")

    return Settings(**config_data)


# Load settings on module import
settings = load_config()
