"""Tests for the salesforce-mapping command."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine

from src.salesforce_sync.cli import main
from src.salesforce_sync.core import database
from src.salesforce_sync.core.database import init_db
from tests.models import CONTACT, CUSTOMER, LEAD


class TestListCommand:
    def test_lists_every_class(self, session, mapping_dir, capsys):
        exit_code = main(["--path", str(mapping_dir), "list"], session=session)

        out = capsys.readouterr().out
        assert exit_code == 0
        assert f"{CUSTOMER}\tAccount\tmappingTable\t-\n" in out
        assert f"{CONTACT}\tContact\tproperty\tEmail\n" in out
        assert f"{LEAD}\tLead\tfullRemote\tEmail\n" in out


class TestValidateCommand:
    def test_all_valid(self, session, mapping_dir, capsys):
        exit_code = main(["--path", str(mapping_dir), "validate"], session=session)

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "3/3 mappings valid" in out

    def test_selected_class_with_missing_field(self, session, mapping_dir, capsys):
        (mapping_dir / "Lead.mapping.xml").write_text(
            f'<mapping><entity class="{LEAD}" object="Lead">'
            '<property field="rating" name="Rating"/></entity></mapping>',
            encoding="utf-8",
        )

        exit_code = main(["--path", str(mapping_dir), "validate", LEAD, CUSTOMER], session=session)

        out = capsys.readouterr().out
        assert exit_code == 1
        assert f"[FAIL] {LEAD}" in out
        assert f"[ OK ] {CUSTOMER}" in out
        assert "1/2 mappings valid" in out

    def test_invalid_search_root(self, session, tmp_path, capsys):
        exit_code = main(["--path", str(tmp_path / "missing"), "validate"], session=session)

        assert exit_code == 1
        assert "invalid directory" in capsys.readouterr().err

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            main([])


class TestOwnSession:
    def test_opens_session_and_disposes_engine(self, mapping_dir, monkeypatch, capsys):
        engine = create_engine("sqlite://")
        init_db(engine)
        monkeypatch.setattr(database, "_engine", engine)

        exit_code = main(["--path", str(mapping_dir), "validate"])

        assert exit_code == 0
        assert "3/3 mappings valid" in capsys.readouterr().out
        assert database._engine is None

    def test_engine_is_disposed_on_error(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(database, "_engine", create_engine("sqlite://"))

        exit_code = main(["--path", str(tmp_path / "missing"), "list"])

        assert exit_code == 1
        assert "invalid directory" in capsys.readouterr().err
        assert database._engine is None
