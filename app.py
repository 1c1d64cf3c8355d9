"""
Flask Application for Email Validation API

Thin HTTP adapter over the mailcheck pipeline. Maps error kinds to
user-facing messages; holds no validation logic.
"""

import logging
import os

from flask import Flask, request, jsonify
from flask_cors import CORS

from mailcheck import ErrorKind, ValidatorConfig, build_validator

# Create Flask application
app = Flask(__name__)
CORS(app)

# Configuration
config = ValidatorConfig.from_env()
validator = build_validator(config)

MESSAGES = {
    ErrorKind.INVALID_FORMAT: 'Invalid email format',
    ErrorKind.MISSING_AT_SYMBOL: "Email is missing '@' symbol",
    ErrorKind.MISSING_DOMAIN: 'Email is missing a domain',
    ErrorKind.MISSING_TOP_LEVEL_DOMAIN: 'Domain is missing a top-level domain',
    ErrorKind.INVALID_CHARACTERS: 'Email contains invalid characters',
    ErrorKind.TOO_LONG: 'Email is too long',
    ErrorKind.NO_MX_RECORDS: 'No MX records found for domain',
    ErrorKind.DOMAIN_NOT_FOUND: 'Domain does not exist',
    ErrorKind.DNS_LOOKUP_FAILED: 'DNS lookup failed',
}

EMAIL_FORM = """<html>
<form method=post>
    <p><input name=email value=email@some.net></p>
    <p><input type=submit value=submit></p>
</form>
"""


def describe_result(result) -> str:
    """Render a ValidationResult as a one-line message."""
    if result.is_valid:
        return 'Email is valid'
    return MESSAGES.get(result.error, 'Unexpected error')


def result_payload(result) -> dict:
    payload = result.to_dict()
    payload['message'] = describe_result(result)
    return payload


@app.route('/health', methods=['GET'])
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON response with status and configured rules
    """
    return jsonify({
        'status': 'healthy',
        'service': 'mailcheck',
        'rules': validator.describe(),
        'dns_server': config.dns_server if config.uses_dns else None,
    }), 200


@app.route('/validate', methods=['POST'])
def validate_email():
    """
    Validate an email address.

    Request Body:
        {
            "email": "user@example.com"
        }

    Returns:
        JSON response with validation result:
        {
            "is_valid": false,
            "email": "plainaddress",
            "error": "MissingAtSymbol",
            "detail": "Email is missing '@' symbol",
            "rule": "format",
            "message": "Email is missing '@' symbol"
        }
    """
    if not request.is_json:
        return jsonify({
            'error': 'Content-Type must be application/json'
        }), 415

    data = request.get_json(silent=True)

    if not isinstance(data, dict):
        return jsonify({
            'error': 'Invalid JSON body'
        }), 400

    email = data.get('email')

    if email is None:
        return jsonify({
            'error': 'Missing required field: email'
        }), 400

    result = validator.validate(email)

    return jsonify(result_payload(result)), 200


@app.route('/validate/batch', methods=['POST'])
def validate_batch():
    """
    Validate multiple email addresses.

    Request Body:
        {
            "emails": ["user1@example.com", "user2@example.com"]
        }
    """
    if not request.is_json:
        return jsonify({
            'error': 'Content-Type must be application/json'
        }), 415

    data = request.get_json(silent=True)

    if not isinstance(data, dict):
        return jsonify({
            'error': 'Invalid JSON body'
        }), 400

    emails = data.get('emails')

    if emails is None:
        return jsonify({
            'error': 'Missing required field: emails'
        }), 400

    if not isinstance(emails, list):
        return jsonify({
            'error': 'emails must be an array'
        }), 400

    if len(emails) == 0:
        return jsonify({
            'error': 'emails array cannot be empty'
        }), 400

    results = validator.validate_batch(emails)

    valid_count = sum(1 for r in results if r.is_valid)

    return jsonify({
        'results': [result_payload(r) for r in results],
        'total': len(results),
        'valid_count': valid_count,
        'invalid_count': len(results) - valid_count
    }), 200


@app.route('/quick-check', methods=['GET'])
def quick_check():
    """
    Quick email validation check via GET request.

    Query Parameters:
        email: Email address to validate
    """
    email = request.args.get('email')

    if email is None:
        return jsonify({
            'error': 'Missing required query parameter: email'
        }), 400

    return jsonify({
        'email': email,
        'is_valid': validator.is_valid(email)
    }), 200


@app.route('/validate_email', methods=['GET'])
def validate_email_form():
    """HTML form posting a single address to /validate_email."""
    return EMAIL_FORM, 200, {'Content-Type': 'text/html; charset=utf-8'}


@app.route('/validate_email', methods=['POST'])
def validate_email_form_post():
    """Validate the 'email' form field and reply in plain text."""
    text = {'Content-Type': 'text/plain; charset=utf-8'}
    email = request.form.get('email')

    if email is None:
        return 'Missing email parameter', 400, text

    return describe_result(validator.validate(email)), 200, text


@app.errorhandler(404)
def not_found(error):
    """Handle 404 errors."""
    return jsonify({
        'error': 'Endpoint not found'
    }), 404


@app.errorhandler(405)
def method_not_allowed(error):
    """Handle 405 errors."""
    return jsonify({
        'error': 'Method not allowed'
    }), 405


@app.errorhandler(500)
def internal_error(error):
    """Handle 500 errors."""
    return jsonify({
        'error': 'Internal server error'
    }), 500


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_DEBUG', 'false').lower() == 'true'
    logging.basicConfig(
        level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    print(f"Starting mailcheck API on port {port}")
    print(f"Rules: {', '.join(validator.describe())}")

    app.run(host='0.0.0.0', port=port, debug=debug)
