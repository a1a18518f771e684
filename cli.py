#!/usr/bin/env python3
"""
Command-line interface for the storefront backend.

Usage:
    python cli.py [command] [options]

Commands:
    serve       Start the API server
    preview     Render an order email from a request JSON file
    test        Run the test suite

Examples:
    python cli.py serve --reload
    python cli.py preview customer order.json --out customer.html
    python cli.py preview admin order.json
"""

import argparse
import json
import subprocess
import sys
from pathlib import Path
from typing import Optional


def run_server(host: str, port: int, reload: bool) -> None:
    """Start the API server."""
    cmd = ["uvicorn", "api.main:app", f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    subprocess.run(cmd)


def run_preview(audience: str, order_file: Path, out: Optional[Path]) -> int:
    """Render the customer or admin email for a request payload."""
    from order_email.templates import render_admin_email, render_customer_email
    from order_email.validation import InvalidOrderRequest, parse_request
    from shared.config import get_settings

    try:
        payload = json.loads(order_file.read_text(encoding="utf-8"))
        request = parse_request(payload)
    except (OSError, ValueError) as e:
        print(f"Could not read {order_file}: {e}", file=sys.stderr)
        return 1
    except InvalidOrderRequest as e:
        print(f"Invalid order request: {e.message}", file=sys.stderr)
        return 1

    render = render_customer_email if audience == "customer" else render_admin_email
    try:
        message = render(request, get_settings())
    except ValueError as e:
        print(f"Cannot render {audience} email: {e}", file=sys.stderr)
        return 1

    if out:
        out.write_text(message.html, encoding="utf-8")
        print(f"{message.subject} -> {out}")
    else:
        print(f"Subject: {message.subject}")
        print(f"To: {', '.join(message.to)}")
        print()
        print(message.html)
    return 0


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    subprocess.run([sys.executable, "-m", "pytest"] + args)


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Storefront backend CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s serve --reload
  %(prog)s preview customer order.json --out customer.html
  %(prog)s test -v
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    # Preview command
    preview_parser = subparsers.add_parser("preview", help="Render an order email")
    preview_parser.add_argument(
        "audience",
        choices=["customer", "admin"],
        help="Which email to render",
    )
    preview_parser.add_argument("order_file", type=Path, help="JSON request body")
    preview_parser.add_argument("--out", type=Path, default=None, help="Write the HTML here")

    # Test command
    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    args = parser.parse_args(argv)

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "preview":
        return run_preview(args.audience, args.order_file, args.out)
    elif args.command == "test":
        run_tests(args.pytest_args)
    else:
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
