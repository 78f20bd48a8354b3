import logging
import os
import sys
from typing import Optional

import requests
from dotenv import load_dotenv
from flask import Flask, request, jsonify
from flask_cors import CORS

from advice_errors import (
	AdviceRequestError,
	ConfigurationError,
	ExtractionError,
	InvalidInputError,
	UnexpectedResponseShapeError,
)
from advice_settings import Settings
from llm_client import (
	EXTRACTION_FAILED_MESSAGE,
	FETCH_FAILED_MESSAGE,
	NO_ADVICE_PLACEHOLDER,
	NO_FILE_MESSAGE,
	NO_TEXT_MESSAGE,
	UNEXPECTED_RESPONSE_MESSAGE,
	request_advice,
)
from log_setup import setup_logging
from medical_report import analyze_report
from text_utils import pdf_to_text

logger = logging.getLogger(__name__)


INDEX_HTML = """
<!doctype html>
<html>
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Med AI Health Assistant</title>
    <style>
      body { font-family: system-ui, Arial, sans-serif; margin: 24px; }
      .card { border: 1px solid #ddd; padding: 16px; border-radius: 8px; max-width: 800px; }
      pre { background: #f7f7f7; padding: 12px; border-radius: 6px; white-space: pre-wrap; }
      button { padding: 8px 12px; }
      .error { color: #b00020; }
    </style>
  </head>
  <body>
    <div class=\"card\">
      <h2>Upload your medical report</h2>
      <input id=\"report\" type=\"file\" accept=\"application/pdf\" />
      <button onclick=\"analyze()\">Get advice</button>
      <p id=\"status\"></p>
      <h3>Extracted text</h3>
      <pre id=\"text\"></pre>
      <h3>Advice</h3>
      <pre id=\"advice\"></pre>
    </div>
    <script>
      async function analyze() {
        const status = document.getElementById('status');
        const input = document.getElementById('report');
        status.className = '';
        if (!input.files.length) {
          status.className = 'error';
          status.textContent = 'Please select a PDF file first.';
          return;
        }
        const form = new FormData();
        form.append('file', input.files[0]);
        status.textContent = 'Analyzing...';
        try {
          const res = await fetch('/analyze-report', { method: 'POST', body: form });
          const j = await res.json();
          if (j.error) {
            status.className = 'error';
            status.textContent = j.error;
          } else {
            status.textContent = '';
          }
          document.getElementById('text').textContent = j.extractedText || '';
          document.getElementById('advice').textContent = j.advice || '';
        } catch (e) {
          status.className = 'error';
          status.textContent = 'Error: ' + (e && e.message ? e.message : 'request failed');
        }
      }
    </script>
  </body>
</html>
"""


def _advice_error_response(exc: AdviceRequestError):
	if isinstance(exc, UnexpectedResponseShapeError):
		return jsonify({"error": UNEXPECTED_RESPONSE_MESSAGE}), 500
	return jsonify({"error": FETCH_FAILED_MESSAGE}), 500


def _uploaded_pdf() -> Optional[bytes]:
	f = request.files.get("file")
	if f is None or not f.filename:
		return None
	return f.read()


def create_app(settings: Settings, session: Optional[requests.Session] = None) -> Flask:
	"""Build the Flask app forwarding advice requests to Gemini.

	The API key comes from ``settings`` and never leaves the server.
	"""
	if not settings.api_key:
		raise ConfigurationError("GEMINI_API_KEY is required to serve advice requests")

	app = Flask(__name__)
	CORS(app, origins=list(settings.cors_origins))
	http = session or requests.Session()

	def ask(text: str) -> Optional[str]:
		return request_advice(
			text,
			settings.api_key,
			model=settings.model,
			api_base=settings.api_base,
			timeout=settings.timeout,
			session=http,
		)

	@app.route("/", methods=["GET"])
	def root():
		return INDEX_HTML

	@app.route("/api/health", methods=["GET"])
	def health():
		return jsonify({"status": "ok"})

	@app.route("/get-medical-advice", methods=["POST"])
	def get_medical_advice():
		payload = request.get_json(silent=True)
		if not isinstance(payload, dict):
			payload = {}
		text = payload.get("extractedText")
		try:
			advice = ask(text)
		except InvalidInputError:
			return jsonify({"error": NO_TEXT_MESSAGE}), 400
		except AdviceRequestError as exc:
			return _advice_error_response(exc)
		return jsonify({"advice": advice or NO_ADVICE_PLACEHOLDER})

	@app.route("/extract-text", methods=["POST"])
	def extract_text():
		data = _uploaded_pdf()
		if data is None:
			return jsonify({"error": NO_FILE_MESSAGE}), 400
		try:
			text = pdf_to_text(data)
		except ExtractionError:
			return jsonify({"error": EXTRACTION_FAILED_MESSAGE}), 400
		return jsonify({"extractedText": text})

	@app.route("/analyze-report", methods=["POST"])
	def analyze():
		data = _uploaded_pdf()
		if data is None:
			return jsonify({"error": NO_FILE_MESSAGE}), 400
		try:
			result = analyze_report(data, settings, session=http)
		except ExtractionError:
			return jsonify({"error": EXTRACTION_FAILED_MESSAGE}), 400
		except InvalidInputError:
			return jsonify({"error": NO_TEXT_MESSAGE}), 400
		except AdviceRequestError as exc:
			return _advice_error_response(exc)
		return jsonify({
			"extractedText": result.extracted_text,
			"advice": result.advice or NO_ADVICE_PLACEHOLDER,
		})

	return app


def main() -> None:
	load_dotenv()
	setup_logging(os.getenv("LOG_LEVEL", "INFO"))
	try:
		settings = Settings.from_env()
	except ConfigurationError as exc:
		logger.critical("Cannot start server: %s (set GEMINI_API_KEY)", exc)
		sys.exit(1)

	logger.info("GEMINI_API_KEY loaded, using model %s", settings.model)
	app = create_app(settings)
	logger.info("Server running on http://%s:%s", settings.host, settings.port)
	app.run(host=settings.host, port=settings.port, debug=settings.debug)


if __name__ == "__main__":
	main()
