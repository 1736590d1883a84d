#!/usr/bin/env python3
"""
Render or publish mixed Markdown + PlantUML content.

Usage:
    confluence-publish render --input page.md
    cat page.md | confluence-publish render --input -
    confluence-publish publish --input page.md --title "Design" --space ARCH
    confluence-publish publish --input page.md --title "Design" --attach diagram.png
    confluence-publish check --space ARCH
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from assembly import assemble_document, describe_result
from publish.config import default_space_key, engine_config_from_env, get_confluence_client, load_env
from publish.pages import PublishError, check_connection, create_page


def _read_input(source: str) -> str:
    if source == '-':
        return sys.stdin.read()
    return Path(source).read_text(encoding='utf-8')


def _cmd_render(args: argparse.Namespace) -> int:
    result = assemble_document(_read_input(args.input), engine_config_from_env())
    print(result.content)
    print(describe_result(result), file=sys.stderr)
    return 0


def _cmd_publish(args: argparse.Namespace) -> int:
    confluence = get_confluence_client()
    if confluence is None:
        print("Error: Missing CONFLUENCE_URL or CONFLUENCE_API_TOKEN", file=sys.stderr)
        print("Set these variables or add them to .env file", file=sys.stderr)
        return 1

    try:
        result = create_page(
            confluence,
            args.title,
            _read_input(args.input),
            space_key=args.space or default_space_key(),
            parent_id=args.parent,
            attachment_path=args.attach,
            config=engine_config_from_env(),
        )
    except PublishError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(result['summary'], file=sys.stderr)
    print(json.dumps(result, indent=2))
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    confluence = get_confluence_client()
    if confluence is None:
        print("Error: Missing CONFLUENCE_URL or CONFLUENCE_API_TOKEN", file=sys.stderr)
        print("Set these variables or add them to .env file", file=sys.stderr)
        return 1

    result = check_connection(confluence, args.space or default_space_key())
    print(json.dumps(result, indent=2))
    return 0 if result['ok'] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Convert mixed Markdown + PlantUML into Confluence storage format',
    )
    sub = parser.add_subparsers(dest='command', required=True)

    render = sub.add_parser('render', help='Print the storage-format body')
    render.add_argument('--input', required=True, help="Source file, or '-' for stdin")
    render.set_defaults(func=_cmd_render)

    publish = sub.add_parser('publish', help='Create a Confluence page')
    publish.add_argument('--input', required=True, help="Source file, or '-' for stdin")
    publish.add_argument('--title', required=True, help='Page title')
    publish.add_argument('--space', help='Space key (default: CONFLUENCE_SPACE_KEY)')
    publish.add_argument('--parent', help='Parent page ID')
    publish.add_argument('--attach', help='File to attach to the new page')
    publish.set_defaults(func=_cmd_publish)

    check = sub.add_parser('check', help='Test the Confluence connection')
    check.add_argument('--space', help='Space key (default: CONFLUENCE_SPACE_KEY)')
    check.set_defaults(func=_cmd_check)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
