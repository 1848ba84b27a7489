from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

ALEMBIC_DIR = Path(__file__).resolve().parents[1] / "alembic"


def alembic_config(url: str) -> Config:
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    config.set_main_option("sqlalchemy.url", url)
    return config


def test_migrations_create_and_drop_tables(tmp_path) -> None:
    url = f"sqlite+pysqlite:///{tmp_path / 'mediabuy.db'}"
    config = alembic_config(url)

    command.upgrade(config, "head")
    engine = create_engine(url)
    tables = set(inspect(engine).get_table_names())
    columns = {column["name"] for column in inspect(engine).get_columns("campaign_records")}
    engine.dispose()

    assert {"campaign_records", "network_caps"} <= tables
    assert columns == {
        "id",
        "date",
        "buyer",
        "network",
        "offer",
        "account",
        "spend",
        "revenue",
        "profit",
        "created_at",
    }

    command.downgrade(config, "base")
    engine = create_engine(url)
    remaining = set(inspect(engine).get_table_names())
    engine.dispose()

    assert not {"campaign_records", "network_caps"} & remaining
