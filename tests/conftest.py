"""Shared fixtures for mapping tests.

Provides:
- engine / session: in-memory SQLite with the side table and test entities
- mapping_dir: mapping files for tests.models written to tmp_path
- mapper: Mapper wired to SQLAlchemy over ``session`` and ``mapping_dir``
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from src.salesforce_sync.bootstrap import build_mapper
from src.salesforce_sync.config import Settings
from src.salesforce_sync.core.database import init_db
from src.salesforce_sync.mapping.mapper import Mapper
from tests.models import CONTACT, CUSTOMER, LEAD


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    engine = create_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    with Session(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def mapping_dir(tmp_path) -> Path:
    """Mapping files for Customer (mapping table), Contact (property), Lead (full remote)."""
    root = tmp_path / "mappings"
    root.mkdir()
    (root / "Customer.mapping.xml").write_text(
        f"""<?xml version="1.0" encoding="UTF-8"?>
<mapping>
    <entity class="{CUSTOMER}" object="Account">
        <property field="name" name="Name"/>
        <property field="phone" name="Phone"/>
        <property field="website" name="Website"/>
        <property field="employees" name="NumberOfEmployees"/>
        <identification-strategies>
            <strategy class="mappingTable"/>
        </identification-strategies>
    </entity>
</mapping>
""",
        encoding="utf-8",
    )
    (root / "Contact.mapping.xml").write_text(
        f"""<?xml version="1.0" encoding="UTF-8"?>
<mapping>
    <entity class="{CONTACT}" object="Contact">
        <property field="first_name" name="FirstName"/>
        <property field="last_name" name="LastName"/>
        <property field="email" name="Email"/>
        <identification-strategies>
            <strategy class="fullRemote" matchingField="Email"/>
            <strategy class="property" property="salesforce_id"/>
        </identification-strategies>
    </entity>
</mapping>
""",
        encoding="utf-8",
    )
    (root / "Lead.mapping.xml").write_text(
        f"""<?xml version="1.0" encoding="UTF-8"?>
<mapping>
    <entity class="{LEAD}" object="Lead">
        <property field="email" name="Email"/>
        <property field="company" name="Company"/>
        <identification-strategies>
            <strategy class="fullRemote" matchingField="Email"/>
        </identification-strategies>
    </entity>
</mapping>
""",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, DATABASE_URL="sqlite://")


@pytest.fixture
def mapper(session, mapping_dir, settings) -> Mapper:
    return build_mapper(session, settings, paths=[mapping_dir])
