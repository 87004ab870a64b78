"""
Tests for the custom ``flask`` CLI commands.
"""

import os

from helpdesk.models.itsm import Category
from helpdesk.models.organization import Division
from helpdesk.models.user import User
from helpdesk.services.user_service import verify_password


class TestDbCheck:
    def test_passes_with_schema(self, app):
        result = app.test_cli_runner().invoke(args=["db-check"])
        assert result.exit_code == 0
        assert "All checks passed" in result.output

    def test_fails_when_tables_missing(self, app, db):
        db.drop_all()
        result = app.test_cli_runner().invoke(args=["db-check"])
        assert result.exit_code == 1
        assert "flask db upgrade" in result.output
        db.create_all()


class TestEnsureUploadDirs:
    def test_creates_directories(self, app, upload_root):
        result = app.test_cli_runner().invoke(args=["ensure-upload-dirs"])
        assert result.exit_code == 0
        for subdir in ("image/avatar", "image/ticket", "file"):
            assert os.path.isdir(os.path.join(upload_root, subdir))


class TestSeedDevData:
    def test_seed_is_idempotent(self, app):
        runner = app.test_cli_runner()
        first = runner.invoke(args=["seed-dev-data", "--password", "changeme1"])
        second = runner.invoke(args=["seed-dev-data"])

        assert first.exit_code == 0
        assert second.exit_code == 0
        assert "already exists" in second.output
        assert Division.query.count() == 1
        assert Category.query.count() == 1

        admin = User.query.one()
        assert admin.role == "ADMIN"
        assert verify_password(admin.password, "changeme1")
