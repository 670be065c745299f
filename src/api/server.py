"""
HTTP API for product extraction.

Endpoints:
    POST /api/extract   {"url": "..."} -> extracted product JSON
    GET  /health        liveness check

Fetch failures keep their meaning on the wire: a bad URL is 400, an
upstream non-2xx keeps its status, a fetch timeout is 408.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, jsonify, request
from rich.console import Console

from config.settings import PipelineConfig, config
from src.fetchers.page_fetcher import FetchError, validate_url
from src.pipeline import ExtractionMode, ExtractionPipeline

console = Console()


def create_app(
    pipeline_config: Optional[PipelineConfig] = None, transport=None
) -> Flask:
    """Build the Flask app. `transport` lets tests stub the upstream fetch."""
    app = Flask(__name__)
    pipeline = ExtractionPipeline(
        pipeline_config or config, mode=ExtractionMode.LOCAL, transport=transport
    )

    @app.route("/health")
    def health():
        return jsonify(
            {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
        )

    @app.route("/api/extract", methods=["POST"])
    def api_extract():
        """Fetch a product page server-side and return the extracted record."""
        data = request.get_json(silent=True) or {}
        url = data.get("url") if isinstance(data, dict) else None

        if not url or not isinstance(url, str):
            return jsonify({"error": "URL is required"}), 400

        try:
            validate_url(url)
            product = asyncio.run(pipeline.extract_url(url))
        except FetchError as e:
            console.print(f"[yellow]Extraction failed for {url}: {e.message}[/yellow]")
            return jsonify({"error": e.message}), e.status_code
        except Exception as e:
            console.print(f"[bold red]URL extraction error: {e}[/bold red]")
            return jsonify({"error": str(e) or "Failed to extract content from URL"}), 500

        return jsonify(product.model_dump(mode="json"))

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": f"Route {request.method} {request.path} not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return (
            jsonify({"error": f"Method {request.method} not allowed for {request.path}"}),
            405,
        )

    return app
