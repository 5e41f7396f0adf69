import pytest

from biomodels_insertion.config import Settings, load_settings, read_properties
from biomodels_insertion.errors import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the caller's environment and .env file."""
    for name in ("NEO4J_URI", "NEO4J_HOST", "NEO4J_PORT", "NEO4J_USERNAME", "NEO4J_PASSWORD",
                 "NEO4J_DATABASE", "PERSON_ID", "MODELS_FILE", "LOG_LEVEL", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:
    """Test configuration loading."""

    def test_defaults(self, clean_env):
        settings = Settings()

        assert settings.connection_uri == "bolt://localhost:7687"
        assert settings.person_id is None
        assert settings.instance_edit_note == "BioModels reference database creation"

    def test_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("PERSON_ID", "9606")
        monkeypatch.setenv("NEO4J_URI", "bolt://graph:7687")

        settings = load_settings()

        assert settings.person_id == 9606
        assert settings.connection_uri == "bolt://graph:7687"

    def test_properties_file(self, clean_env, tmp_path):
        properties = tmp_path / "config.properties"
        properties.write_text(
            "# release configuration\n"
            "user=reactome\n"
            "password = secret\n"
            "host=db.example.org\n"
            "port=7688\n"
            "personId=9606\n"
            "unrelated=ignored\n",
            encoding="utf-8",
        )

        settings = load_settings(str(properties))

        assert settings.neo4j_username == "reactome"
        assert settings.neo4j_password == "secret"
        assert settings.connection_uri == "bolt://db.example.org:7688"
        assert settings.require_person_id() == 9606

    def test_overrides_beat_properties(self, clean_env, tmp_path):
        properties = tmp_path / "config.properties"
        properties.write_text("personId=1\nneo4jUri=bolt://a:1\n", encoding="utf-8")

        settings = load_settings(str(properties), person_id=2, models_file=None)

        assert settings.person_id == 2
        assert settings.neo4j_uri == "bolt://a:1"
        assert settings.models_file == "models2pathways.tsv"

    def test_missing_properties_file(self, clean_env, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(str(tmp_path / "missing.properties"))

    def test_unparseable_person_id(self, clean_env, tmp_path):
        properties = tmp_path / "config.properties"
        properties.write_text("personId=abc\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_settings(str(properties))

    def test_require_person_id(self, clean_env):
        with pytest.raises(ConfigurationError):
            Settings().require_person_id()

    def test_blank_person_id_in_env_file(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("PERSON_ID=\nLOG_LEVEL=DEBUG\n", encoding="utf-8")

        settings = load_settings()

        assert settings.person_id is None
        assert settings.log_level == "DEBUG"
        with pytest.raises(ConfigurationError, match="No person id configured"):
            settings.require_person_id()

    def test_read_properties_separators(self, tmp_path):
        properties = tmp_path / "config.properties"
        properties.write_text("a=1\nb: 2\n! comment\nc\nurl=bolt://x:7687\n", encoding="utf-8")

        assert read_properties(properties) == {"a": "1", "b": "2", "c": "", "url": "bolt://x:7687"}
