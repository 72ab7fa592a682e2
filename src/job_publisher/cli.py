#!/usr/bin/env python3
"""
Blogger Publisher CLI

Publish, edit, list and delete job posts on Blogger from command-line
arguments or a batch JSON file.

Usage: job-publisher publish "Backend Engineer" "Remote" "3+ yrs Node" --labels Jobs,Remote
"""

import argparse
import asyncio
import sys
from typing import List, Optional, Sequence

from dotenv import load_dotenv

from .config import Settings, get_settings
from .errors import PublisherError
from .logging_config import setup_logging
from .models import GeneratedPost, JobFields
from .services.publishing import PublishPipeline, load_batch_file, run_batch
from .services.publishing.factory import build_pipeline

logger = setup_logging("publisher_cli")


class PublisherArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


REQUIRED_POSITIONALS = {
    "publish": (("title", "title"), ("location", "location"), ("requirements", "requirements")),
    "edit": (("post_id", "postId"), ("title", "title"), ("location", "location"), ("requirements", "requirements")),
    "delete": (("post_id", "postId"),),
    "batch": (("file_path", "filePath.json"),),
}


def _job_flags() -> argparse.ArgumentParser:
    flags = argparse.ArgumentParser(add_help=False)
    flags.add_argument("--link", "--apply-link", dest="apply_link", help="Application URL.")
    flags.add_argument("--email", "--apply-email", dest="apply_email", help="Application e-mail address.")
    flags.add_argument("--date", dest="interview_date", help="Walk-in interview date.")
    flags.add_argument("--time", dest="interview_time", help="Walk-in interview time.")
    flags.add_argument("--venue", "--interview-location", dest="interview_location", help="Walk-in interview venue.")
    return flags


def _job_positionals(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("title")
    parser.add_argument("location")
    parser.add_argument("requirements")
    parser.add_argument("company", nargs="?")
    parser.add_argument("salary", nargs="?")


def build_parser() -> PublisherArgumentParser:
    parser = PublisherArgumentParser(prog="job-publisher", description="Blogger Publisher Bot")
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    job_flags = _job_flags()

    publish = subparsers.add_parser("publish", parents=[job_flags], help="Generate and create a post.")
    _job_positionals(publish)
    publish.add_argument("--publish", action="store_true", help="Publish immediately instead of drafting.")
    publish.add_argument("--labels", help="Comma separated post labels, e.g. Jobs,Remote.")

    edit = subparsers.add_parser("edit", parents=[job_flags], help="Regenerate the body of an existing post.")
    edit.add_argument("post_id", metavar="postId")
    _job_positionals(edit)

    list_cmd = subparsers.add_parser("list", help="List recent posts.")
    list_cmd.add_argument("max_results", metavar="maxResults", type=int, nargs="?", default=10)

    delete = subparsers.add_parser("delete", help="Delete a post.")
    delete.add_argument("post_id", metavar="postId")

    batch = subparsers.add_parser("batch", help="Create one post per job in a JSON array file.")
    batch.add_argument("file_path", metavar="filePath.json")
    batch.add_argument("--publish", action="store_true", help="Publish immediately instead of drafting.")

    return parser


def check_required(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """Reject required positionals given as blank strings."""
    blank = [
        metavar
        for dest, metavar in REQUIRED_POSITIONALS.get(args.command, ())
        if not str(getattr(args, dest) or "").strip()
    ]
    if blank:
        parser.error(f"the following arguments must not be empty: {', '.join(blank)}")


def job_from_args(args: argparse.Namespace) -> JobFields:
    return JobFields(
        title=args.title,
        location=args.location,
        requirements=args.requirements,
        company=args.company,
        salary=args.salary,
        apply_link=args.apply_link,
        apply_email=args.apply_email,
        interview_date=args.interview_date,
        interview_time=args.interview_time,
        interview_location=args.interview_location,
        labels=getattr(args, "labels", None),
    )


def format_post_table(posts: Sequence[GeneratedPost]) -> str:
    headers = ("id", "title", "status", "published")
    rows = [(p.id, p.title, p.status or "", p.published or "") for p in posts]
    widths = [max(len(str(cell)) for cell in column) for column in zip(headers, *rows)]
    lines = ["  ".join(str(cell).ljust(width) for cell, width in zip(row, widths)) for row in [headers, *rows]]
    lines.insert(1, "  ".join("-" * width for width in widths))
    return "\n".join(lines)


async def handle_publish(pipeline: PublishPipeline, args: argparse.Namespace) -> None:
    job = job_from_args(args)
    await pipeline.publish(job, publish=args.publish, labels=job.labels)


async def handle_edit(pipeline: PublishPipeline, args: argparse.Namespace) -> None:
    await pipeline.edit(args.post_id, job_from_args(args))


async def handle_list(pipeline: PublishPipeline, args: argparse.Namespace) -> None:
    print(f"Listing last {args.max_results} posts...")
    try:
        posts = await pipeline.store.list(args.max_results)
    except PublisherError as e:
        print(f"Failed to list posts: {e}")
        return
    if not posts:
        print("No posts found.")
        return
    print(format_post_table(posts))


async def handle_delete(pipeline: PublishPipeline, args: argparse.Namespace) -> None:
    print(f"Deleting post {args.post_id}...")
    try:
        await pipeline.store.delete(args.post_id)
    except PublisherError as e:
        print(f"Failed to delete post: {e}")
        return
    print("Post deleted successfully.")


async def handle_batch(pipeline: PublishPipeline, args: argparse.Namespace, settings: Settings) -> None:
    print(f"Starting batch process from {args.file_path}...")
    try:
        items = load_batch_file(args.file_path)
    except (OSError, ValueError, PublisherError) as e:
        print(f"Failed batch process: {e}")
        return
    print(f"Found {len(items)} jobs to process.")
    report = await run_batch(
        pipeline,
        items,
        publish=args.publish,
        delay=settings.batch_delay_seconds,
        progress=print,
    )
    print()
    print(report.summary())


async def run_command(args: argparse.Namespace, settings: Settings, pipeline: Optional[PublishPipeline] = None) -> None:
    pipeline = pipeline or build_pipeline(settings, progress=print)
    if args.command == "publish":
        await handle_publish(pipeline, args)
    elif args.command == "edit":
        await handle_edit(pipeline, args)
    elif args.command == "list":
        await handle_list(pipeline, args)
    elif args.command == "delete":
        await handle_delete(pipeline, args)
    elif args.command == "batch":
        await handle_batch(pipeline, args, settings)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0
    check_required(parser, args)

    logger.info("Running command", extra={"command": args.command})
    try:
        asyncio.run(run_command(args, get_settings()))
    except PublisherError as e:
        # Raised while wiring the pipeline, e.g. a malformed CONTENT_MODELS entry
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
