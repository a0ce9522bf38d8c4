import pytest

import main


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda: None)


def test_missing_api_url_aborts_startup(monkeypatch):
    monkeypatch.delenv("PERPLEXICA_API_URL", raising=False)
    started = []
    monkeypatch.setattr(main, "create_server", lambda config: started.append(config))

    with pytest.raises(SystemExit) as excinfo:
        main.main()

    assert excinfo.value.code == 1
    assert started == []


def test_starts_server_with_loaded_config(monkeypatch):
    monkeypatch.setenv("PERPLEXICA_API_URL", "http://localhost:3000/")
    monkeypatch.setenv("PERPLEXICA_PROVIDER_ID", "openai")

    class FakeServer:
        ran = False

        def run(self):
            FakeServer.ran = True

    configs = []

    def fake_create_server(config):
        configs.append(config)
        return FakeServer()

    monkeypatch.setattr(main, "create_server", fake_create_server)

    main.main()

    assert FakeServer.ran
    assert configs[0].base_url == "http://localhost:3000"
    assert configs[0].default_provider_id == "openai"
