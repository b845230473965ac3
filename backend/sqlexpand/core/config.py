"""
Connection settings read from the environment (or a .env file).

Only standard connection parameters; they are passed to the driver unchanged.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from sqlexpand.core.connect import DataSource, ProductTypeEnum


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    DB_PRODUCT_TYPE: ProductTypeEnum = ProductTypeEnum.SQLITE
    DB_HOST: str | None = None
    DB_PORT: int | None = None
    DB_NAME: str = ":memory:"
    DB_USER: str | None = None
    DB_PASSWORD: str = ""

    EXTERNAL_DB_CONNECT_TIMEOUT: int = 10  # seconds

    @property
    def datasource(self) -> DataSource:
        return DataSource(
            product_type=self.DB_PRODUCT_TYPE,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            connect_timeout=self.EXTERNAL_DB_CONNECT_TIMEOUT,
        )


settings = Settings()  # type: ignore
