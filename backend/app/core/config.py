from pydantic_settings import BaseSettings

DEFAULT_FOOTER_LINES = [
    "Licensed as a Juristic Representative of an authorised Financial Services Provider",
    "Company registration and FSP numbers are available on request",
    "Registered office details are printed on the signed agreement",
    "Tel: 0861 263 346 | Email: info@example.com",
]


class Settings(BaseSettings):
    database_url: str = "sqlite+pysqlite:///./quotations.db"
    documents_dir: str = "uploads"
    log_level: str = "INFO"

    logo_path: str | None = None
    company_name: str = "Capital Partners"
    footer_lines: list[str] = DEFAULT_FOOTER_LINES
    currency_symbol: str = "R"

    placement_fee_percent: float = 1.0
    admin_fee_percent: float = 0.5
    commission_percent: float = 0.5
    offer_validity_days: int = 14

    class Config:
        env_prefix = ""
        case_sensitive = False
        env_file = ".env"

settings = Settings()
