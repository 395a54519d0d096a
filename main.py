from flask import Flask, request, jsonify
from flask_cors import CORS
from incentive_engine import DashboardProcessor
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the dashboard front-end and n8n webhooks call the API cross-origin)
CORS(app, send_wildcard=True)

# Initialize the dashboard processor
processor = DashboardProcessor.from_env()


def _api_info():
    return {
        "status": "ok",
        "message": "Appointment Incentive Dashboard API",
        "version": "1.0",
        "endpoints": {
            "dashboard": "/dashboard [POST]",
            "calculate_incentive": "/calculate_incentive [POST]",
            "health": "/health [GET]"
        }
    }


@app.route("/", methods=["GET"])
def index():
    """Root endpoint"""
    return jsonify(_api_info()), 200


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify(_api_info()), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/dashboard", methods=["POST"])
def dashboard():
    """
    Build an agent dashboard from record store rows
    """
    try:
        # Get input data
        input_data = request.get_json(force=True, silent=True)

        if not input_data or not isinstance(input_data, dict):
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        # Log request
        agent = input_data.get('agent')
        agent_name = agent.get('name', 'Unknown') if isinstance(agent, dict) else 'Unknown'
        logger.info(f"Processing dashboard: {agent_name}")

        # Process through engine
        result = processor.process_from_dict(input_data)

        logger.info(f"Dashboard processed successfully: {agent_name}")

        return jsonify(result), 200

    except ValueError as e:
        # Validation errors from engine
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": str(e),
            "status": "failed"
        }), 500


@app.route("/calculate_incentive", methods=["POST"])
def calculate_incentive():
    """
    Run the incentive engine on an approved count and cancellation rate
    """
    try:
        input_data = request.get_json(force=True, silent=True)

        if not input_data or not isinstance(input_data, dict):
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        result = processor.calculate_incentive_from_dict(input_data)
        return jsonify(result), 200

    except ValueError as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": str(e),
            "status": "failed"
        }), 500


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
