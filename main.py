#!/usr/bin/env python3
"""
Closet Product Extraction - Main Entry Point

Fetches product pages, recovers structured product data (title, price,
brand, category, color, size, images) and prints or saves it.

Usage:
    python main.py https://shop.example/p/123          # Extract one URL
    python main.py URL1 URL2 --local                   # Extract and save to ./data
    python main.py --html-file page.html --base-url URL
    python main.py --serve                             # Run the extraction API
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from config.settings import PipelineConfig
from src.pipeline import ExtractionMode, ExtractionPipeline

console = Console()


class CustomHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """Custom formatter that preserves formatting and adds width."""

    def __init__(self, prog):
        super().__init__(prog, max_help_position=40, width=100)


def parse_args(argv=None):
    """Parse command line arguments."""

    epilog = """
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
EXAMPLES
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
  Extract:
    python main.py https://shop.example/p/hoodie       Print a summary table
    python main.py URL --json                          Print raw JSON records
    python main.py URL1 URL2 --local -o ./closet       Save records to ./closet

  Offline:
    python main.py --html-file page.html --base-url https://shop.example/p/1

  Backend:
    python main.py URL --mode backend --backend-url http://localhost:3000
    python main.py --serve --port 3000                 Run the extraction API

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
ENVIRONMENT (.env)
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
  CLOSET_FETCH_TIMEOUT   Upstream fetch timeout in seconds (default: 10)
  CLOSET_BACKEND_URL     Backend for --mode backend
  CLOSET_OUTPUT_DIR      Base directory for --local
  CLOSET_LOG_LEVEL       DEBUG, INFO, WARNING, ...
  PORT                   Port for --serve
"""

    parser = argparse.ArgumentParser(
        prog="python main.py",
        description="""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
                      CLOSET PRODUCT EXTRACTION
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
Turns product page URLs into closet item records using JSON-LD, Open Graph
meta tags and regex heuristics.
""",
        epilog=epilog,
        formatter_class=CustomHelpFormatter,
    )

    parser.add_argument("urls", nargs="*", metavar="URL", help="Product page URLs")

    extract_group = parser.add_argument_group("Extraction Options")
    extract_group.add_argument(
        "--html-file",
        type=str,
        metavar="FILE",
        help="Extract from a saved HTML file instead of fetching",
    )
    extract_group.add_argument(
        "--base-url",
        type=str,
        metavar="URL",
        help="Page URL used to resolve links in --html-file",
    )
    extract_group.add_argument(
        "--mode",
        type=str,
        default=ExtractionMode.LOCAL.value,
        choices=[m.value for m in ExtractionMode],
        help="Extract in-process (local) or via a running backend (default: local)",
    )
    extract_group.add_argument(
        "--backend-url", type=str, metavar="URL", help="Backend for --mode backend"
    )
    extract_group.add_argument(
        "--timeout", type=float, metavar="SECONDS", help="Upstream fetch timeout"
    )
    extract_group.add_argument(
        "--json", action="store_true", help="Print records as JSON"
    )

    storage_group = parser.add_argument_group("Storage Options")
    storage_group.add_argument(
        "--local", action="store_true", help="Save records to local files"
    )
    storage_group.add_argument(
        "--output", "-o", type=str, metavar="DIR", help="Local output directory (default: ./data)"
    )
    storage_group.add_argument(
        "--download-images", action="store_true", help="Also download product images (with --local)"
    )

    server_group = parser.add_argument_group("Server Options")
    server_group.add_argument("--serve", action="store_true", help="Run the extraction API")
    server_group.add_argument("--host", type=str, help="API host (default: 127.0.0.1)")
    server_group.add_argument("--port", type=int, help="API port (default: 3000)")

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def build_config(args) -> PipelineConfig:
    """Defaults, then .env / environment, then command line flags."""
    cfg = PipelineConfig.from_env()
    if args.timeout:
        cfg.fetch.timeout_seconds = args.timeout
    if args.backend_url:
        cfg.fetch.backend_url = args.backend_url
    if args.output:
        cfg.storage.base_dir = Path(args.output)
    if args.download_images:
        cfg.storage.download_images = True
    if args.log_level:
        cfg.logging.log_level = args.log_level
    if args.host:
        cfg.server.host = args.host
    if args.port:
        cfg.server.port = args.port
    return cfg


def setup_logging(cfg: PipelineConfig) -> None:
    handlers = []
    if cfg.logging.log_to_console:
        handlers.append(RichHandler(console=Console(stderr=True), show_path=False))
    logging.basicConfig(
        level=cfg.logging.log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
    )


def print_records(records: list[dict]) -> None:
    console.print_json(json.dumps(records if len(records) != 1 else records[0]))


def main(argv=None) -> int:
    """Main entry point."""
    load_dotenv()
    args = parse_args(argv)
    cfg = build_config(args)
    setup_logging(cfg)

    if args.serve:
        from src.api import create_app

        app = create_app(cfg)
        console.print(
            f"[bold green]Extraction API on http://{cfg.server.host}:{cfg.server.port}[/bold green]"
        )
        app.run(host=cfg.server.host, port=cfg.server.port, debug=cfg.server.debug)
        return 0

    pipeline = ExtractionPipeline(
        cfg,
        mode=ExtractionMode(args.mode),
        save_local=args.local,
        download_images=args.download_images,
    )

    if args.html_file:
        html_path = Path(args.html_file)
        if not html_path.exists():
            console.print(f"[bold red]File not found: {html_path}[/bold red]")
            return 1
        base_url = args.base_url or html_path.resolve().as_uri()
        product = pipeline.extract_html(
            html_path.read_text(encoding="utf-8", errors="replace"), base_url
        )
        if args.local and asyncio.run(pipeline.save(product)) is None:
            return 1
        print_records([product.model_dump(mode="json")])
        return 0

    if not args.urls:
        console.print("[bold red]No URLs given. See --help.[/bold red]")
        return 1

    result = asyncio.run(pipeline.run(args.urls))
    if args.json:
        print_records(result["products"])
    return 0 if result["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
