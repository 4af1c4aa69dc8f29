"""Tests for conflict messages derived from database constraint failures."""
from sqlalchemy.exc import IntegrityError

from smartwatt.core.exceptions import integrity_error_message


def _integrity_error(driver_message: str) -> IntegrityError:
    return IntegrityError("STATEMENT", {}, Exception(driver_message))


class TestIntegrityErrorMessage:

    def test_foreign_key_violation(self):
        sqlite = _integrity_error("FOREIGN KEY constraint failed")
        postgres = _integrity_error(
            'update or delete on table "system_devices" violates foreign key constraint '
            '"user_home_devices_system_device_id_fkey" on table "user_home_devices"'
        )
        assert integrity_error_message(sqlite) == "Related record is missing or still in use"
        assert integrity_error_message(postgres) == "Related record is missing or still in use"

    def test_unique_violation(self):
        sqlite = _integrity_error("UNIQUE constraint failed: users.email")
        postgres = _integrity_error('duplicate key value violates unique constraint "users_email_key"')
        assert integrity_error_message(sqlite) == "A record with these values already exists"
        assert integrity_error_message(postgres) == "A record with these values already exists"

    def test_other_constraint(self):
        error = _integrity_error("NOT NULL constraint failed: users.email")
        assert integrity_error_message(error) == "Request conflicts with existing data"
