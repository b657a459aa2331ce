# src/idx_wrapper/cli.py
import argparse
import asyncio
import json
import logging
import re
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from tqdm import tqdm

from idx_wrapper.controllers.wrap_controller import WrapController
from idx_wrapper.managers.config_manager import config_manager
from idx_wrapper.model import WrapFailure, WrapRequest
from idx_wrapper.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="idx-wrapper", description="Create IDX wrappers from client web pages.")
    parser.add_argument("--log-level", default=None, help="Overrides debug.level from settings.json")
    sub = parser.add_subparsers(dest="command", required=True)

    wrap = sub.add_parser("wrap", help="Wrap a single site")
    wrap.add_argument("--site", required=True, help="URL of the page to wrap")
    wrap.add_argument("--title", default="", help="Replacement <title> text")
    wrap.add_argument("--target", choices=["id", "element", "class", "selector"], required=True)
    wrap.add_argument("--id", dest="target_id", help="Value for --target id")
    wrap.add_argument("--el", dest="element", help="Value for --target element")
    wrap.add_argument("--class", dest="css_class", help="Value for --target class")
    wrap.add_argument("--target-value", dest="target_value", help="Value for --target selector")
    wrap.add_argument("--h1-ignore", action="store_true", help="Keep <h1> elements")
    wrap.add_argument("--remove-conflicts", action="store_true", help="Remove known conflicting scripts")
    wrap.add_argument("--remove-scripts", action="store_true", help="Remove all scripts")
    wrap.add_argument("--output", "-o", type=Path, help="Write the wrapper here instead of stdout")

    batch = sub.add_parser("batch", help="Wrap every job in a JSON file")
    batch.add_argument("jobs", type=Path, help="JSON list of objects with the query-string keys")
    batch.add_argument("--out-dir", type=Path, required=True, help="Directory for the generated wrappers")

    return parser


def _request_from_args(args: argparse.Namespace) -> WrapRequest:
    return WrapRequest(
        site=args.site,
        title=args.title,
        target=args.target,
        target_id=args.target_id,
        element=args.element,
        css_class=args.css_class,
        target_value=args.target_value,
        h1_ignore=args.h1_ignore,
        remove_conflicts=args.remove_conflicts,
        remove_scripts=args.remove_scripts,
    )


def _output_name(site: str, index: int) -> str:
    """e.g. 'https://www.example.com/homes/' -> '001_www.example.com_homes.html'"""
    slug = re.sub(r'^https?://', '', site)
    slug = re.sub(r'[^A-Za-z0-9._-]+', '_', slug).strip('_') or "site"
    return f"{index:03d}_{slug}.html"


async def _run_wrap(controller: WrapController, args: argparse.Namespace) -> int:
    outcome = await controller.wrap(_request_from_args(args))
    if isinstance(outcome, WrapFailure):
        print(json.dumps(outcome.to_dict()), file=sys.stderr)
        return 1

    if args.output:
        args.output.write_text(outcome, encoding="utf-8")
        logger.info("Wrapper written to %s", args.output)
    else:
        sys.stdout.write(outcome)
    return 0


async def _run_batch(controller: WrapController, jobs: List[dict], out_dir: Path) -> int:
    out_dir.mkdir(parents=True, exist_ok=True)
    failures = 0

    for index, job in enumerate(tqdm(jobs, desc="Wrapping", unit="site"), start=1):
        try:
            wrap_request = WrapRequest.model_validate(job)
        except ValidationError as e:
            logger.error("Skipping job %d: %s", index, e)
            failures += 1
            continue

        outcome = await controller.wrap(wrap_request)
        if isinstance(outcome, WrapFailure):
            logger.error("Job %d: %s (%s)", index, outcome.error, outcome.site_requested)
            failures += 1
            continue

        path = out_dir / _output_name(wrap_request.site, index)
        path.write_text(outcome, encoding="utf-8")

    logger.info("Batch finished: %d of %d wrappers created.", len(jobs) - failures, len(jobs))
    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logger(
        args.log_level or config_manager.get_nested("debug.level", "INFO"),
        module_specific_levels=config_manager.get_nested("debug.module_levels"),
        silenced_loggers=config_manager.get_nested("debug.silenced_loggers")
    )

    controller = WrapController()

    if args.command == "wrap":
        return asyncio.run(_run_wrap(controller, args))

    try:
        jobs = json.loads(args.jobs.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read jobs file %s: %s", args.jobs, e)
        return 1
    if not isinstance(jobs, list):
        logger.error("Jobs file %s must contain a JSON list.", args.jobs)
        return 1

    return asyncio.run(_run_batch(controller, jobs, args.out_dir))


if __name__ == "__main__":
    sys.exit(main())
