"""
Create all tables from the models
Safe to re-run: existing tables are left as they are
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sqlalchemy import inspect

from boosterhub.config import get_settings
from boosterhub.database import build_sync_engine, metadata
import boosterhub.models  # noqa: F401  registers every table on the metadata


def main():
    engine = build_sync_engine(get_settings())
    metadata.create_all(engine)

    tables = sorted(inspect(engine).get_table_names())
    print("tables:", ", ".join(tables))
    engine.dispose()


if __name__ == '__main__':
    main()
