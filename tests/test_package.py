"""Basic tests for the envwire package."""


def test_import_envwire():
    import envwire

    assert envwire.__version__ == "1.0.0"


def test_version_format():
    import envwire

    parts = envwire.__version__.split(".")
    assert len(parts) == 3
    assert all(p.isdigit() for p in parts)


def test_public_api_exports():
    import envwire

    for name in envwire.__all__:
        assert hasattr(envwire, name), name


def test_top_level_pipeline(tmp_path):
    from dataclasses import dataclass

    from envwire import EnvBinder, EnvLoader

    @dataclass
    class Settings:
        summaries: str = ""

    env_file = tmp_path / ".env"
    env_file.write_text("SUMMARIES=Cool\n")

    reader = EnvLoader().add_env_files(env_file).load()
    assert EnvBinder(reader).bind(Settings).summaries == "Cool"
