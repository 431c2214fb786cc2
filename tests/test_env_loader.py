"""Tests for EnvLoader: explicit files, convention overlays and parsing."""

import os
import sys
from pathlib import Path

import pytest

from envwire.config import EnvironmentContext, EnvLoader, EnvReader, parse_env_text
from envwire.exceptions import ConfigurationError, ParseError


class TestAddEnvFiles:
    def test_no_paths_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            EnvLoader().add_env_files()
        assert exc_info.value.code == "EMPTY_PATH_LIST"

    def test_empty_list_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            EnvLoader().add_env_files([])
        assert exc_info.value.code == "EMPTY_PATH_LIST"

    @pytest.mark.parametrize("bad", [None, ""])
    def test_null_or_empty_path_rejected(self, bad):
        with pytest.raises(ConfigurationError) as exc_info:
            EnvLoader().add_env_files("a.env", bad)
        assert exc_info.value.code == "INVALID_PATH"
        assert exc_info.value.details["index"] == 1

    def test_accepts_list_and_path_objects(self, write_env):
        first = write_env("a.env", "A=1\n")
        second = write_env("b.env", "B=2\n")

        reader = EnvLoader().add_env_files([str(first), second]).load()

        assert reader == {"A": "1", "B": "2"}
        assert reader.sources == (first, second)

    def test_returns_loader_for_chaining(self, write_env):
        loader = EnvLoader()
        assert loader.add_env_files(write_env("a.env", "A=1\n")) is loader


class TestLoad:
    def test_later_file_wins(self, write_env):
        a = write_env("a.env", "K=from-a\nONLY_A=1\n")
        b = write_env("b.env", "K=from-b\nONLY_B=1\n")

        reader = EnvLoader().add_env_files(a, b).load()

        assert reader["K"] == "from-b"
        assert reader["ONLY_A"] == "1"
        assert reader["ONLY_B"] == "1"

    def test_keys_keep_first_definition_order(self, write_env):
        a = write_env("a.env", "FIRST=1\nSECOND=1\n")
        b = write_env("b.env", "THIRD=1\nFIRST=2\n")

        reader = EnvLoader().add_env_files(a, b).load()

        assert list(reader) == ["FIRST", "SECOND", "THIRD"]

    def test_loading_is_deterministic(self, write_env):
        a = write_env("a.env", "X=1\nY=two\n")
        b = write_env("b.env", "Y=three\nZ=\n")

        first = EnvLoader().add_env_files(a, b).load()
        second = EnvLoader().add_env_files(a, b).load()

        assert first == second
        assert list(first) == list(second)

    def test_default_env_file_in_current_directory(self, in_tests_dir):
        reader = EnvLoader().load()
        assert reader["SUMMARIES"] == "Cool"

    def test_relative_paths_use_base_path(self, env_files_dir):
        reader = EnvLoader().set_base_path(env_files_dir).add_env_files("config.env").load()
        assert reader["SUMMARIES"] == "Cool"

    def test_missing_file_is_skipped(self, write_env, tmp_path):
        present = write_env("present.env", "A=1\n")

        reader = EnvLoader().add_env_files(tmp_path / "missing.env", present).load()

        assert reader == {"A": "1"}
        assert reader.sources == (present,)

    def test_no_files_gives_empty_reader(self, tmp_path, capsys):
        reader = EnvLoader().add_env_files(tmp_path / "nope.env").load()

        assert len(reader) == 0
        assert reader.sources == ()
        assert "No env files found" in capsys.readouterr().out

    def test_directory_is_unreadable(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            EnvLoader().add_env_files(tmp_path).load()
        assert exc_info.value.code == "ENV_FILE_UNREADABLE"
        assert exc_info.value.details["file"] == str(tmp_path)

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="needs POSIX permissions and a non-root user",
    )
    def test_unsearchable_directory_is_unreadable(self, tmp_path):
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / ".env").write_text("A=1\n")
        locked.chmod(0o000)
        try:
            with pytest.raises(ConfigurationError) as exc_info:
                EnvLoader().add_env_files(locked / ".env").load()
        finally:
            locked.chmod(0o755)

        assert exc_info.value.code == "ENV_FILE_UNREADABLE"
        assert exc_info.value.details["file"] == str(locked / ".env")

    def test_path_below_a_file_is_skipped(self, tmp_path):
        plain = tmp_path / "plain"
        plain.write_text("A=1\n")

        reader = EnvLoader().add_env_files(plain / ".env", plain).load()

        assert reader == {"A": "1"}
        assert reader.sources == (plain,)

    def test_invalid_encoding_is_unreadable(self, tmp_path):
        path = tmp_path / "latin.env"
        path.write_bytes("NAME=caf\xe9\n".encode("latin-1"))

        with pytest.raises(ConfigurationError):
            EnvLoader().add_env_files(path).load()

    def test_custom_encoding(self, tmp_path):
        path = tmp_path / "latin.env"
        path.write_bytes("NAME=caf\xe9\n".encode("latin-1"))

        reader = EnvLoader().set_encoding("latin-1").add_env_files(path).load()

        assert reader["NAME"] == "caf\xe9"

    def test_parse_error_reports_file_and_line(self, write_env):
        path = write_env("bad.env", "GOOD=1\n\n# comment\nNOT A VALID LINE\n")

        with pytest.raises(ParseError) as exc_info:
            EnvLoader().add_env_files(path).load()

        assert exc_info.value.file == str(path)
        assert exc_info.value.line == 4
        assert exc_info.value.details["content"] == "NOT A VALID LINE"

    def test_parse_error_in_second_file(self, write_env):
        good = write_env("good.env", "A=1\n")
        bad = write_env("bad.env", 'A=2\nB="unterminated\n')

        with pytest.raises(ParseError) as exc_info:
            EnvLoader().add_env_files(good, bad).load()

        assert exc_info.value.file == str(bad)
        assert exc_info.value.line == 2

    def test_reader_is_immutable(self, write_env):
        reader = EnvLoader().add_env_files(write_env("a.env", "A=1\n")).load()

        with pytest.raises(TypeError):
            reader["A"] = "2"  # type: ignore[index]
        assert isinstance(reader, EnvReader)


class TestParsing:
    def test_comments_blank_lines_and_export(self):
        text = "# header\n\nexport A=1\nB = two  # trailing\n   \nC='quoted # not comment'\nD=\"with\\nescape\"\n"

        assert dict(parse_env_text(text)) == {
            "A": "1",
            "B": "two",
            "C": "quoted # not comment",
            "D": "with\nescape",
        }

    def test_bare_key_is_empty_string(self):
        assert parse_env_text("FLAG\nEMPTY=\n") == [("FLAG", ""), ("EMPTY", "")]

    def test_keys_are_case_sensitive(self):
        assert parse_env_text("key=lower\nKEY=upper\n") == [("key", "lower"), ("KEY", "upper")]

    def test_parse_error_default_source(self):
        with pytest.raises(ParseError) as exc_info:
            parse_env_text("=novalue\n")
        assert exc_info.value.file == "<string>"
        assert exc_info.value.line == 1


class TestInterpolation:
    def test_references_earlier_keys(self, write_env):
        path = write_env("a.env", "BASE=/srv/app\nDATA_DIR=${BASE}/data\n")

        reader = EnvLoader().add_env_files(path).load()

        assert reader["DATA_DIR"] == "/srv/app/data"

    def test_references_across_files(self, write_env):
        a = write_env("a.env", "HOST=localhost\n")
        b = write_env("b.env", "URL=http://${HOST}:8000\n")

        assert EnvLoader().add_env_files(a, b).load()["URL"] == "http://localhost:8000"

    def test_falls_back_to_os_environ_and_default(self, write_env, monkeypatch):
        monkeypatch.setenv("ENVWIRE_TEST_HOST", "db.internal")
        monkeypatch.delenv("ENVWIRE_TEST_MISSING", raising=False)
        path = write_env(
            "a.env", "DSN=pg://${ENVWIRE_TEST_HOST}/app\nMODE=${ENVWIRE_TEST_MISSING:-safe}\n"
        )

        reader = EnvLoader().add_env_files(path).load()

        assert reader["DSN"] == "pg://db.internal/app"
        assert reader["MODE"] == "safe"

    def test_file_value_wins_over_os_environ(self, write_env, monkeypatch):
        monkeypatch.setenv("ENVWIRE_TEST_NAME", "from-os")
        path = write_env("a.env", "ENVWIRE_TEST_NAME=from-file\nGREETING=hi ${ENVWIRE_TEST_NAME}\n")

        assert EnvLoader().add_env_files(path).load()["GREETING"] == "hi from-file"

    def test_interpolation_can_be_disabled(self, write_env):
        path = write_env("a.env", "BASE=/srv\nDATA=${BASE}/data\n")

        reader = EnvLoader(interpolate=False).add_env_files(path).load()

        assert reader["DATA"] == "${BASE}/data"


class TestLoadEnv:
    def test_dev_overlay_loads_all_four_files(self, env_files_dir):
        reader = (
            EnvLoader()
            .set_base_path(env_files_dir / "environment" / "dev")
            .set_environment_name("dev")
            .load_env()
        )

        assert reader["DEV_ENV"] == "1"
        assert reader["DEV_ENV_DEV"] == "1"
        assert reader["DEV_ENV_DEV_LOCAL"] == "1"
        assert reader["DEV_ENV_LOCAL"] == "1"
        assert len(reader.sources) == 4

    def test_overlay_precedence(self, write_env, tmp_path):
        write_env(".env", "LEVEL=base\nFROM_BASE=1\n")
        write_env(".env.staging", "LEVEL=environment\n")
        write_env(".env.local", "LEVEL=local\n")
        write_env(".env.staging.local", "LEVEL=environment-local\n")

        reader = EnvLoader().set_base_path(tmp_path).set_environment_name("staging").load_env()

        assert reader["LEVEL"] == "environment-local"
        assert reader["FROM_BASE"] == "1"
        assert [p.name for p in reader.sources] == [
            ".env",
            ".env.staging",
            ".env.local",
            ".env.staging.local",
        ]

    def test_local_overrides_environment_file(self, write_env, tmp_path):
        write_env(".env.staging", "LEVEL=environment\n")
        write_env(".env.local", "LEVEL=local\n")

        reader = EnvLoader().set_base_path(tmp_path).set_environment_name("staging").load_env()

        assert reader["LEVEL"] == "local"

    def test_test_environment_skips_local(self, write_env, tmp_path):
        write_env(".env", "LEVEL=base\n")
        write_env(".env.local", "LEVEL=local\nLOCAL_ONLY=1\n")
        write_env(".env.test", "TEST_ONLY=1\n")

        reader = EnvLoader().set_base_path(tmp_path).set_environment_name("test").load_env()

        assert reader["LEVEL"] == "base"
        assert "LOCAL_ONLY" not in reader
        assert reader["TEST_ONLY"] == "1"

    def test_context_current_environment_is_fallback(self, write_env, tmp_path):
        write_env(".env.production", "PROD=1\n")
        write_env(".env.development", "DEVELOPMENT=1\n")
        context = EnvironmentContext(base_path=tmp_path, current_environment="production")

        reader = EnvLoader().load_env(context)

        assert reader == {"PROD": "1"}

    def test_explicit_name_beats_context(self, write_env, tmp_path):
        write_env(".env.production", "PROD=1\n")
        write_env(".env.dev", "DEV=1\n")
        context = EnvironmentContext(current_environment="production")

        reader = EnvLoader().set_base_path(tmp_path).set_environment_name("dev").load_env(context)

        assert reader == {"DEV": "1"}

    def test_defaults_to_development_in_cwd(self, write_env, tmp_path, monkeypatch):
        write_env(".env.development", "DEVELOPMENT=1\n")
        monkeypatch.chdir(tmp_path)

        assert EnvLoader().load_env()["DEVELOPMENT"] == "1"

    def test_no_overlay_files_gives_empty_reader(self, tmp_path):
        reader = EnvLoader().set_base_path(tmp_path).set_environment_name("dev").load_env()
        assert len(reader) == 0

    @pytest.mark.parametrize("bad", [None, ""])
    def test_base_path_required(self, bad):
        with pytest.raises(ConfigurationError) as exc_info:
            EnvLoader().set_base_path(bad)
        assert exc_info.value.code == "INVALID_BASE_PATH"

    @pytest.mark.parametrize("bad", [None, "", "   "])
    def test_environment_name_required(self, bad):
        with pytest.raises(ConfigurationError) as exc_info:
            EnvLoader().set_environment_name(bad)
        assert exc_info.value.code == "INVALID_ENVIRONMENT_NAME"

    def test_environment_name_is_stripped(self, write_env, tmp_path):
        write_env(".env.qa", "QA=1\n")
        reader = EnvLoader().set_base_path(tmp_path).set_environment_name(" qa ").load_env()
        assert reader["QA"] == "1"

    def test_loaded_path_type(self, env_files_dir):
        reader = EnvLoader().set_base_path(str(env_files_dir / "environment" / "dev")).set_environment_name("dev").load_env()
        assert all(isinstance(p, Path) for p in reader.sources)
