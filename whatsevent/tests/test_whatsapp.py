"""
Test suite for the WhatsApp webhook and its helpers.
"""

from fastapi.testclient import TestClient

from whatsevent.config.external_services.twilio import TwilioConfig, compute_twilio_signature
from whatsevent.utils.whatsapp import (
    UNKNOWN_EVENT_MESSAGE,
    extract_event_name,
    find_join_code,
    normalize_sender,
    parse_join_command,
    render_twiml,
)

WEBHOOK = "/api/whatsapp/webhook"
SENDER = "whatsapp:+15550001111"


class TestMessageParsing:
    """Test helpers that read incoming messages."""

    def test_parse_join_command(self):
        assert parse_join_command("join AB12CD") == "join ab12cd"
        assert parse_join_command("  Join ab12cd ") == "join ab12cd"
        assert parse_join_command("join ab12cd when is it?") is None

    def test_find_join_code(self):
        assert find_join_code("Hi, join ab12cd when is it?") == "join ab12cd"
        assert find_join_code("I want to join the party") is None

    def test_extract_event_name(self):
        assert extract_event_name("I am interested in the event: Hack Day. Tell me more") == "Hack Day"
        assert extract_event_name("Tell me about Hack Day!") == "Hack Day"
        assert extract_event_name("what is the schedule for tomorrow please") == "what is the schedule for"
        assert extract_event_name("Hi") == ""

    def test_normalize_sender(self):
        assert normalize_sender("whatsapp:+1 (555) 000-1111") == "15550001111"

    def test_render_twiml_escapes_text(self):
        xml = render_twiml("Tea & <snacks>")

        assert xml.endswith("<Response><Message>Tea &amp; &lt;snacks&gt;</Message></Response>")


class TestWebhook:
    """Test POST /api/whatsapp/webhook."""

    def test_missing_fields(self, client):
        response = client.post(WEBHOOK, data={"From": SENDER})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required parameters"}

    def test_join_command(self, client, stored_event):
        response = client.post(WEBHOOK, data={"From": SENDER, "Body": stored_event.join_code})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/xml")
        assert "Welcome to the Hack Day event assistant!" in response.text

    def test_unknown_join_code(self, client):
        response = client.post(WEBHOOK, data={"From": SENDER, "Body": "join 000000"})

        assert "I couldn't find an event with that code." in response.text

    def test_question_with_join_code(self, client, stored_event):
        body = f"{stored_event.join_code} when does it start?"

        response = client.post(WEBHOOK, data={"From": "whatsapp:+19998887777", "Body": body})

        assert "June 15, 2023 at 10:00" in response.text

    def test_question_matched_by_event_name(self, client, stored_event):
        body = "I am interested in the event: Hack Day. Is there parking?"

        response = client.post(WEBHOOK, data={"From": "whatsapp:+19998887777", "Body": body})

        assert "Free parking in lot B." in response.text

    def test_question_matched_by_sender_number(self, client, stored_event):
        response = client.post(WEBHOOK, data={"From": SENDER, "Body": "Is there parking?"})

        assert "Free parking in lot B." in response.text

    def test_unknown_event(self, client):
        response = client.post(WEBHOOK, data={"From": "whatsapp:+19998887777", "Body": "Is there parking?"})

        assert response.status_code == 200
        assert UNKNOWN_EVENT_MESSAGE in response.text


class TestWebhookSignature:
    """Test Twilio signature verification."""

    def test_rejects_missing_signature(self, make_app, stored_event):
        app = make_app(twilio_config=TwilioConfig(auth_token="secret"))

        with TestClient(app) as client:
            response = client.post(WEBHOOK, data={"From": SENDER, "Body": "Is there parking?"})

        assert response.status_code == 403
        assert response.json() == {"error": "Invalid signature"}

    def test_accepts_valid_signature(self, make_app, stored_event):
        app = make_app(twilio_config=TwilioConfig(auth_token="secret"))
        params = {"From": SENDER, "Body": "Is there parking?"}
        signature = compute_twilio_signature("secret", f"http://testserver{WEBHOOK}", params)

        with TestClient(app) as client:
            response = client.post(WEBHOOK, data=params, headers={"X-Twilio-Signature": signature})

        assert response.status_code == 200
        assert "Free parking in lot B." in response.text
