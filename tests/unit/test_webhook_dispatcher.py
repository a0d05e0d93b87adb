"""
Tests del dispatcher de webhooks: compuertas de método, body, firma,
JSON y payload, y el ruteo por `kind`.
"""
import json

import pytest

from esa_sync.application.services.webhook_dispatcher import (
    EsaWebhookDispatcher,
    WebhookRequest,
    WebhookResponse,
    compute_signature,
)


SECRET = "s3cr3t"


def _body(kind: str = "post_create", number: int = 1) -> str:
    return json.dumps({
        "kind": kind,
        "team": {"name": "docs"},
        "post": {
            "name": "Launch",
            "body_md": "hola",
            "body_html": "<p>hola</p>",
            "message": "",
            "wip": False,
            "number": number,
            "url": f"https://docs.esa.io/posts/{number}",
        },
        "user": {"screen_name": "alice", "name": "Alice"},
    })


def _signed(body: str, *, method: str = "POST", secret: str = SECRET, header: str = "X-Esa-Signature") -> WebhookRequest:
    return WebhookRequest(method=method, headers={header: compute_signature(secret, body)}, body=body)


class RecordingHandler:
    def __init__(self, response: WebhookResponse = WebhookResponse.ok()) -> None:
        self.payloads = []
        self._response = response

    async def __call__(self, payload) -> WebhookResponse:
        self.payloads.append(payload)
        return self._response


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def dispatcher(handler: RecordingHandler) -> EsaWebhookDispatcher:
    return EsaWebhookDispatcher(
        secret=SECRET,
        handlers={kind: handler for kind in ("post_create", "post_update", "post_archive", "post_delete")},
    )


def test_compute_signature_format() -> None:
    signature = compute_signature("secret", "{}")
    assert signature.startswith("sha256=")
    assert len(signature) == len("sha256=") + 64


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
async def test_non_post_method_is_rejected(dispatcher, handler, method):
    response = await dispatcher.dispatch(_signed(_body(), method=method))

    assert response == WebhookResponse(405, "This endpoint only supports POST method.")
    assert handler.payloads == []


@pytest.mark.asyncio
async def test_missing_body_is_rejected(dispatcher, handler):
    response = await dispatcher.dispatch(WebhookRequest(method="POST", headers={}, body=None))

    assert response == WebhookResponse(400, "Body must be provided.")
    assert handler.payloads == []


@pytest.mark.asyncio
async def test_missing_signature_is_rejected(dispatcher, handler):
    response = await dispatcher.dispatch(WebhookRequest(method="POST", headers={}, body=_body()))

    assert response == WebhookResponse(400, "X-Esa-Signature didn't match.")
    assert handler.payloads == []


@pytest.mark.asyncio
async def test_signature_with_other_secret_is_rejected(dispatcher, handler):
    response = await dispatcher.dispatch(_signed(_body(), secret="other"))

    assert response.status_code == 400
    assert response.body == "X-Esa-Signature didn't match."
    assert handler.payloads == []


@pytest.mark.asyncio
async def test_body_changed_by_one_byte_is_rejected(dispatcher, handler):
    body = _body()
    request = _signed(body)
    tampered = WebhookRequest(method="POST", headers=request.headers, body=body.replace("Launch", "Lunch"))

    response = await dispatcher.dispatch(tampered)

    assert response.body == "X-Esa-Signature didn't match."
    assert handler.payloads == []


@pytest.mark.asyncio
async def test_signature_is_checked_before_json(dispatcher):
    response = await dispatcher.dispatch(WebhookRequest(method="POST", headers={}, body="not json"))

    assert response.body == "X-Esa-Signature didn't match."


@pytest.mark.asyncio
async def test_signature_header_is_case_insensitive(dispatcher, handler):
    response = await dispatcher.dispatch(_signed(_body(), header="x-esa-signature"))

    assert response == WebhookResponse.ok()
    assert len(handler.payloads) == 1


@pytest.mark.asyncio
async def test_invalid_json_is_rejected(dispatcher, handler):
    response = await dispatcher.dispatch(_signed("{not json"))

    assert response == WebhookResponse(400, "Invalid JSON body.")
    assert handler.payloads == []


@pytest.mark.asyncio
async def test_invalid_payload_reports_validator_errors(dispatcher, handler):
    response = await dispatcher.dispatch(_signed(json.dumps({"kind": "comment_create"})))

    assert response.status_code == 400
    assert response.body == 'The `kind` value "comment_create" is not supported.'
    assert handler.payloads == []


@pytest.mark.asyncio
async def test_valid_request_reaches_handler(dispatcher, handler):
    response = await dispatcher.dispatch(_signed(_body("post_update", number=7)))

    assert response == WebhookResponse.ok()
    assert handler.payloads[0].kind == "post_update"
    assert handler.payloads[0].post.number == 7


@pytest.mark.asyncio
async def test_handler_response_is_returned_as_is():
    failing = RecordingHandler(WebhookResponse(500, "Failed to sync post #1: boom"))
    dispatcher = EsaWebhookDispatcher(secret=SECRET, handlers={"post_create": failing})

    response = await dispatcher.dispatch(_signed(_body()))

    assert response == WebhookResponse(500, "Failed to sync post #1: boom")


@pytest.mark.asyncio
async def test_valid_kind_without_handler_is_acknowledged(handler):
    dispatcher = EsaWebhookDispatcher(secret=SECRET, handlers={"post_create": handler})

    response = await dispatcher.dispatch(_signed(_body("post_archive")))

    assert response == WebhookResponse.ok()
    assert handler.payloads == []
