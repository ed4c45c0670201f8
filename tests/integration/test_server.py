import httpx
import pytest

from langfile_translator.app_config import AppConfig
from langfile_translator.backends import HuggingFaceBackend, PhraseTableBackend
from langfile_translator.retry import RetryPolicy
from langfile_translator.server import create_app


@pytest.fixture
def client():
    app = create_app(AppConfig(), backend_factory=lambda options: PhraseTableBackend())
    app.config["TESTING"] = True
    return app.test_client()


def timing_out_backend(options):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    return HuggingFaceBackend(
        api_token="test-token",
        retry_policy=RetryPolicy(max_attempts=1, base_delay=0, max_elapsed_seconds=None),
        transport=httpx.MockTransport(handler),
    )


class TestTranslateEndpoint:

    def test_translates_text(self, client):
        response = client.post('/translate', json={
            "text": '<i class="fa fa-trash"></i> Delete',
            "source": "en",
            "target": "sr",
        })

        assert response.status_code == 200
        assert response.get_json() == {
            "original": '<i class="fa fa-trash"></i> Delete',
            "translated": '<i class="fa fa-trash"></i> Obriši',
            "source_lang": "en",
            "target_lang": "sr",
            "model_used": "phrase-table:sr",
        }
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_defaults_to_serbian_latin(self, client):
        response = client.post('/translate', json={"text": "Cancel"})

        body = response.get_json()
        assert body["translated"] == "Otkaži"
        assert body["target_lang"] == "sr-Latn"

    @pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": 42}, {"source": "en"}])
    def test_invalid_input(self, client, payload):
        response = client.post('/translate', json=payload)

        assert response.status_code == 400
        assert response.get_json() == {"error": "Invalid input data"}

    def test_non_json_body(self, client):
        response = client.post('/translate', data="text=hello", content_type="text/plain")

        assert response.status_code == 400

    def test_preflight(self, client):
        response = client.options('/translate')

        assert response.status_code == 200
        assert response.data == b""
        assert response.headers["Access-Control-Allow-Methods"] == "POST, GET, OPTIONS"
        assert response.headers["Access-Control-Allow-Headers"] == "Content-Type, Authorization"

    def test_unknown_service_is_server_error(self):
        app = create_app(AppConfig())
        response = app.test_client().post('/translate', json={"text": "Cancel", "service": "deepl"})

        assert response.status_code == 500
        assert "Unknown translation service" in response.get_json()["error"]


class TestDocumentEndpoint:

    def test_translates_document(self, client, sample_document):
        response = client.post('/translate/document', json={
            "content": sample_document,
            "options": {"target_lang": "sr", "chunk_size": 4},
        })

        assert response.status_code == 200
        body = response.get_json()
        assert "'welcome' => 'Dobrodošli u našu aplikaciju!'," in body["translated_content"]
        assert body["summary"]["item_count"] == 13
        assert body["summary"]["translated_count"] == 13
        assert body["summary"]["target_lang"] == "sr"
        assert body["warnings"] == []

    def test_rejects_unknown_options(self, client):
        response = client.post('/translate/document', json={"content": "", "options": {"colour": "red"}})

        assert response.status_code == 400

    def test_hard_failure_returns_error(self, sample_document):
        app = create_app(AppConfig(), backend_factory=timing_out_backend)

        response = app.test_client().post('/translate/document', json={"content": sample_document})

        assert response.status_code == 502
        body = response.get_json()
        assert "translated_content" not in body
        assert "Translation aborted" in body["error"]

    def test_preflight(self, client):
        response = client.options('/translate/document')

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "*"
