"""
CLI entry point for microposts.

Usage:
    python -m microposts validate --content C --author A
    python -m microposts user add ID [--name N]
    python -m microposts post --content C --author A
    python -m microposts post --content-file F --author A
    python -m microposts list [--author A] [--last N]
    python -m microposts show POST_ID
    python -m microposts delete POST_ID

All output is JSON. Exit codes: 0=success, 1=rejected, 2=error.
"""
import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional


def _output(data: Dict[str, Any], exit_code: int = 0):
    """Print JSON output and exit."""
    print(json.dumps(data, indent=2, default=str))
    sys.exit(exit_code)


def _read_content(args) -> Optional[str]:
    """Content from --content-file if given, else --content."""
    if getattr(args, "content_file", None):
        try:
            with open(args.content_file, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            _output({"success": False, "error": f"Cannot read content file: {e}"}, exit_code=2)
    return args.content


def _non_negative_int(value: str) -> int:
    """argparse type for counts: 0 or more."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {number}")
    return number


def _configure_logging(verbose: bool):
    from microposts.config import load_config

    level = logging.DEBUG if verbose else getattr(logging, load_config().log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cmd_validate(args):
    """Handle validate subcommand. Never touches the database."""
    from microposts.validation import errors_by_field, full_messages, validate, violation_tags

    violations = validate(_read_content(args), args.author)
    if violations:
        _output({
            "valid": False,
            "violations": violation_tags(violations),
            "errors": full_messages(violations),
            "errors_by_field": errors_by_field(violations),
        }, exit_code=1)
    _output({"valid": True, "violations": [], "errors": [], "errors_by_field": {}})


def cmd_user(args):
    """Handle user subcommand."""
    from microposts.posts import create_user

    result = create_user(args.user_id, name=args.name)
    _output(result, exit_code=0 if result.get("success") else 2)


def cmd_post(args):
    """Handle post subcommand."""
    from microposts.posts import create_post

    result = create_post(_read_content(args), args.author)
    if result.get("success"):
        _output(result, exit_code=0)
    elif result.get("violations"):
        _output(result, exit_code=1)
    else:
        _output(result, exit_code=2)


def cmd_list(args):
    """Handle list subcommand."""
    from microposts.posts import list_posts

    result = list_posts(author_reference=args.author, last=args.last)
    _output(result, exit_code=2 if result.get("error") else 0)


def cmd_show(args):
    """Handle show subcommand."""
    from microposts.posts import get_post

    post = get_post(args.post_id)
    if post is None:
        _output({"success": False, "error": f"Post #{args.post_id} not found."}, exit_code=2)
    _output({"success": True, "post": post})


def cmd_delete(args):
    """Handle delete subcommand."""
    from microposts.posts import delete_post

    result = delete_post(args.post_id)
    _output(result, exit_code=0 if result.get("success") else 2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="microposts",
        description="Microposts: validated short posts",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ── validate ──
    validate_parser = subparsers.add_parser("validate", help="Check a post without saving it")
    validate_parser.add_argument("--content", help="Post content")
    validate_parser.add_argument("--content-file", help="Read content from file")
    validate_parser.add_argument("--author", help="Author id")
    validate_parser.set_defaults(func=cmd_validate)

    # ── user ──
    user_parser = subparsers.add_parser("user", help="User management")
    user_subparsers = user_parser.add_subparsers(dest="user_action", help="User actions")
    user_add = user_subparsers.add_parser("add", help="Create a user")
    user_add.add_argument("user_id", help="User id")
    user_add.add_argument("--name", help="Display name")
    user_add.set_defaults(func=cmd_user)

    # ── post ──
    post_parser = subparsers.add_parser("post", help="Validate and save a post")
    post_parser.add_argument("--content", help="Post content")
    post_parser.add_argument("--content-file", help="Read content from file")
    post_parser.add_argument("--author", help="Author id")
    post_parser.set_defaults(func=cmd_post)

    # ── list ──
    list_parser = subparsers.add_parser("list", help="List posts, newest first")
    list_parser.add_argument("--author", help="Filter by author id")
    list_parser.add_argument("--last", type=_non_negative_int, default=None,
                             help="Number of posts (default: config list_limit)")
    list_parser.set_defaults(func=cmd_list)

    # ── show / delete ──
    show_parser = subparsers.add_parser("show", help="Show a post")
    show_parser.add_argument("post_id", type=int)
    show_parser.set_defaults(func=cmd_show)

    delete_parser = subparsers.add_parser("delete", help="Delete a post")
    delete_parser.add_argument("post_id", type=int)
    delete_parser.set_defaults(func=cmd_delete)

    return parser


def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(2)

    if not hasattr(args, "func"):
        # "user" without "add"
        parser.print_help()
        sys.exit(2)

    _configure_logging(args.verbose)

    try:
        args.func(args)
    except Exception as e:
        logging.getLogger(__name__).exception("Command failed")
        _output({"success": False, "error": str(e)}, exit_code=2)


if __name__ == "__main__":
    main()
