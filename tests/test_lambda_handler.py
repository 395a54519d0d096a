"""Tests for AWS Lambda handler."""

import base64
import json

from lambda_handler import lambda_handler

DASHBOARD_PAYLOAD = {
    "period": "payroll-cycle",
    "now": "2026-10-14T12:00:00-07:00",
    "agent": {"agent_id": "agent_002", "name": "Jane Doe", "base_rate": 16.00, "hours_worked": 40},
    "records": [
        {"Date Submitted": "10/12/2026 10:00 AM", "Status": "Approved", "Homeowner Name(s)": "A"},
        {"Date Submitted": "10/13/2026 10:00 AM", "Status": "Cancelled", "Homeowner Name(s)": "B"},
    ],
}


class TestLambdaHandler:
    """Test the Lambda handler routes and responses."""

    def test_health_check(self):
        """GET /health returns healthy status."""
        event = {"httpMethod": "GET", "path": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "healthy"

    def test_api_info(self):
        """GET /api returns API information."""
        event = {"httpMethod": "GET", "path": "/api"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "ok"
        assert "dashboard" in body["endpoints"]

    def test_cors_preflight(self):
        """OPTIONS requests return CORS headers."""
        event = {"httpMethod": "OPTIONS", "path": "/dashboard"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert "Access-Control-Allow-Origin" in response["headers"]
        assert "Access-Control-Allow-Methods" in response["headers"]

    def test_not_found(self):
        """Unknown paths return 404."""
        event = {"httpMethod": "GET", "path": "/unknown"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 404

    def test_dashboard_success(self):
        """POST /dashboard builds a dashboard."""
        event = {"httpMethod": "POST", "path": "/dashboard", "body": json.dumps(DASHBOARD_PAYLOAD)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["counts"]["approved"] == 1
        assert body["counts"]["cancellation_rate"] == 50.0
        assert body["incentive"]["total_incentive"] == 50.0
        assert body["pay_summary"]["total_pay"]["value"] == 690.0

    def test_dashboard_base64_body(self):
        """API Gateway may base64 encode the body."""
        encoded = base64.b64encode(json.dumps(DASHBOARD_PAYLOAD).encode("utf-8")).decode("ascii")
        event = {"httpMethod": "POST", "path": "/dashboard", "body": encoded, "isBase64Encoded": True}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200

    def test_calculate_incentive(self):
        """POST /calculate_incentive runs the bare engine."""
        event = {
            "httpMethod": "POST",
            "path": "/calculate_incentive",
            "body": json.dumps({"approved_count": 12, "cancellation_rate": 10}),
        }
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["incentive"]["total_incentive"] == 418.0

    def test_dashboard_empty_body(self):
        """POST /dashboard with empty body returns 400."""
        event = {"httpMethod": "POST", "path": "/dashboard", "body": ""}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert "error" in body

    def test_dashboard_invalid_json(self):
        """POST /dashboard with invalid JSON returns 400."""
        event = {"httpMethod": "POST", "path": "/dashboard", "body": "not valid json"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert "error" in body

    def test_validation_error(self):
        """Out-of-contract engine input returns 400."""
        event = {
            "httpMethod": "POST",
            "path": "/calculate_incentive",
            "body": json.dumps({"approved_count": -2, "cancellation_rate": 10}),
        }
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["status"] == "validation_failed"

    def test_http_api_format(self):
        """Supports HTTP API v2 event format."""
        event = {"requestContext": {"http": {"method": "GET"}}, "rawPath": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200

    def test_agent_must_be_an_object(self):
        """A non-object agent is a validation error, not a crash."""
        payload = dict(DASHBOARD_PAYLOAD, agent="bob")
        event = {"httpMethod": "POST", "path": "/dashboard", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["status"] == "validation_failed"

    def test_non_finite_agent_pay_rejected(self):
        """NaN or Infinity pay inputs return 400."""
        for value in ("NaN", "Infinity"):
            payload = dict(DASHBOARD_PAYLOAD, agent={"name": "Jane Doe", "base_rate": value, "hours_worked": 40})
            event = {"httpMethod": "POST", "path": "/dashboard", "body": json.dumps(payload)}
            response = lambda_handler(event, None)

            assert response["statusCode"] == 400, value
            body = json.loads(response["body"])
            assert "base_rate" in body["error"]
