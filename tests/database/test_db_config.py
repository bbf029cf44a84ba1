from __future__ import annotations

from src.timetable_attendance.timetable_attendance.database.connection import DatabaseConnection, DBConfig


def test_from_dict_fills_defaults_and_coerces_port():
    config = DBConfig.from_dict({"host": "db", "port": "3307", "password": "s3cret"})

    assert config == DBConfig("db", 3307, "root", "s3cret", "school_db", 10)
    assert config.describe() == "root@db:3307/school_db"


def test_instance_is_shared_until_the_config_changes():
    first = DatabaseConnection.get_instance(DBConfig.from_dict({"database": "school_db_test"}))

    assert DatabaseConnection.get_instance(DBConfig.from_dict({"database": "school_db_test"})) is first

    other = DatabaseConnection.get_instance(DBConfig.from_dict({"database": "other_db"}))
    assert other is not first
    assert other.config.database == "other_db"
