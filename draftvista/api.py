import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from draftvista.config import Config
from draftvista.errors import InputError
from draftvista.llm.base import LLMClient
from draftvista.pipeline import AnalysisPipeline
from draftvista.schemas import AnalysisType, ErrorResponse
from draftvista.services.uploads import (
    ensure_upload_dir,
    is_allowed_file,
    managed_upload,
    save_upload,
    upload_dir_info,
)

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "POST /api/analyze-pre-submission",
    "POST /api/analyze-post-rejection",
]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status: int, error: str, message: str = None, path: str = None):
    body = ErrorResponse(error=error, message=message, path=path)
    return jsonify(body.model_dump(mode="json", by_alias=True, exclude_none=True)), status


def create_app(config: Config = None, llm=None, scraper=None, sleep=None) -> Flask:
    """Build the Flask app. The oracle client is created here, so a missing API key stops startup."""
    config = config or Config.from_env()
    if llm is None:
        llm = LLMClient(model_name=config.model_name)
    ensure_upload_dir(config.upload_dir)
    logger.info("Uploads directory status: %s", upload_dir_info(config.upload_dir))

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = config.max_file_size
    CORS(app, origins=[config.frontend_url], supports_credentials=True)

    pipeline = AnalysisPipeline(llm, config=config, scraper=scraper, sleep=sleep)
    app.extensions["draftvista.pipeline"] = pipeline

    def run_analysis(analysis_type: AnalysisType):
        upload = request.files.get("manuscript")
        journal_url = (request.form.get("journalUrl") or "").strip()
        reviewer_comments = request.form.get("reviewerComments")

        if upload is None or not upload.filename:
            return _error(400, "No manuscript file provided")
        if not is_allowed_file(upload.filename, config.allowed_extensions):
            return _error(400, "Invalid file type. Only PDF, DOCX, and DOC files are allowed.")
        if not journal_url:
            return _error(400, "Journal URL is required")
        if analysis_type == AnalysisType.POST_REJECTION and not (reviewer_comments or "").strip():
            return _error(400, "Reviewer comments are required for post-rejection analysis")

        saved = save_upload(upload.stream, upload.filename, config.upload_dir)
        with managed_upload(saved) as path:
            try:
                response = pipeline.run(
                    path,
                    journal_url,
                    analysis_type,
                    filename=upload.filename,
                    size=path.stat().st_size,
                    reviewer_comments=reviewer_comments,
                )
            except InputError as e:
                return _error(400, str(e))
            except Exception as e:
                logger.error("%s analysis error: %s", analysis_type.value, e)
                return _error(500, "Analysis failed", str(e))
        return jsonify(response.model_dump(mode="json", by_alias=True))

    @app.route("/health")
    def health():
        return jsonify({
            "status": "OK",
            "message": "DraftVista backend is running",
            "timestamp": _now(),
        })

    @app.route("/api/test")
    def api_test():
        return jsonify({
            "message": "DraftVista API is working!",
            "endpoints": ENDPOINTS,
            "timestamp": _now(),
        })

    @app.route("/api/analyze-pre-submission", methods=["POST"])
    def analyze_pre_submission():
        return run_analysis(AnalysisType.PRE_SUBMISSION)

    @app.route("/api/analyze-post-rejection", methods=["POST"])
    def analyze_post_rejection():
        return run_analysis(AnalysisType.POST_REJECTION)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        return _error(413, "File too large", f"Maximum upload size is {config.max_file_size} bytes")

    @app.errorhandler(404)
    def not_found(e):
        return _error(404, "Route not found", path=request.path)

    @app.errorhandler(Exception)
    def internal_error(e):
        if isinstance(e, HTTPException):
            return _error(e.code, e.name, e.description)
        logger.exception("Unhandled error: %s", e)
        return _error(500, "Internal server error", str(e))

    return app
