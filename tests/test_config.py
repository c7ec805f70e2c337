"""Tests for run configuration."""

from pathlib import Path

import pytest

from csvseed.seeding.config import (
    SeedConfig,
    parse_column_mapping,
    seeder_basename,
    snake_case,
)


class TestNames:
    @pytest.mark.parametrize(
        "seeder,expected",
        [
            ("UsersTableSeeder", "users"),
            ("UserProfilesTableSeeder", "user_profiles"),
            ("Countries", "countries"),
            ("already_snake", "already_snake"),
            ("user profiles", "user_profiles"),
            ("user profilesTableSeeder", "user_profiles"),
        ],
    )
    def test_seeder_basename(self, seeder, expected):
        assert seeder_basename(seeder) == expected

    def test_snake_case_matches_word_boundaries(self):
        assert snake_case("OrderItems") == "order_items"


class TestSeedConfig:
    def test_defaults(self):
        config = SeedConfig(table="users", filename="users.csv")
        assert config.delimiter == ";"
        assert config.offset_rows == 0
        assert config.insert_chunk_size == 50
        assert config.trim_whitespace is True
        assert config.hashable == "password"
        assert config.column_mapping is None

    def test_for_seeder_derives_table_and_file(self, tmp_path):
        config = SeedConfig.for_seeder("UserProfilesTableSeeder", tmp_path)
        assert config.table == "user_profiles"
        assert Path(config.filename) == tmp_path / "database" / "seeds" / "csvs" / "user_profiles.csv"

    def test_for_seeder_respects_overrides(self):
        config = SeedConfig.for_seeder("UsersTableSeeder", table="accounts", insert_chunk_size=5)
        assert config.table == "accounts"
        assert config.filename.endswith("users.csv")
        assert config.insert_chunk_size == 5

    def test_is_immutable(self):
        config = SeedConfig(table="users", filename="users.csv")
        with pytest.raises(AttributeError):
            config.table = "other"

    def test_mapping_is_copied(self):
        mapping = {0: "id"}
        config = SeedConfig(table="users", filename="u.csv", column_mapping=mapping)
        mapping[1] = "name"
        assert config.column_mapping == {0: "id"}

    def test_with_source(self):
        config = SeedConfig(table="users", filename="a.csv")
        assert config.with_source() is config
        changed = config.with_source("b.csv", ",")
        assert (changed.filename, changed.delimiter) == ("b.csv", ",")
        assert config.filename == "a.csv"

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"table": ""}, "table"),
            ({"filename": ""}, "filename"),
            ({"delimiter": ";;"}, "delimiter"),
            ({"delimiter": ""}, "delimiter"),
            ({"offset_rows": -1}, "offset_rows"),
            ({"insert_chunk_size": 0}, "insert_chunk_size"),
        ],
    )
    def test_validation(self, overrides, message):
        options = {"table": "users", "filename": "users.csv", **overrides}
        with pytest.raises(ValueError, match=message):
            SeedConfig(**options)


class TestParseColumnMapping:
    def test_parses_pairs(self):
        assert parse_column_mapping("0=id, 2=name,3=description") == {
            0: "id",
            2: "name",
            3: "description",
        }

    def test_ignores_empty_items(self):
        assert parse_column_mapping("0=id,,") == {0: "id"}

    @pytest.mark.parametrize("text", ["id", "x=id", "0=", "-1=id"])
    def test_rejects_bad_entries(self, text):
        with pytest.raises(ValueError):
            parse_column_mapping(text)
