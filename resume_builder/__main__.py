"""Main entry point for Resume Builder."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from resume_builder import __version__
from resume_builder.config.settings import OutputFormat, Settings
from resume_builder.utils.logging import configure_logging


def _write_json(path: Path, payload: object) -> None:
    def _default(value: object):
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        model_dump = getattr(value, "model_dump", None)
        if callable(model_dump):
            return model_dump(mode="json")
        return str(value)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(payload, indent=2, default=_default),
        encoding="utf-8",
    )


def _read_posting(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="resume-builder",
        description="Resume Builder: tailor a resume corpus to a job posting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  resume-builder tailor --posting job.txt --job-title "Backend Engineer" --company Acme
  resume-builder tailor --posting acme.txt --posting globex.txt --template cv.md.j2
  cat job.txt | resume-builder extract --posting -
  resume-builder check-corpus --corpus resume.yaml
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )

    subparsers = parser.add_subparsers(
        dest="mode",
        title="modes",
        description="Available operating modes",
    )

    # Tailor mode
    tailor_parser = subparsers.add_parser(
        "tailor",
        help="Build a tailored resume for one or more job postings",
    )
    tailor_parser.add_argument(
        "--posting",
        action="append",
        required=True,
        help="Path to a job posting text ('-' reads stdin); repeat for more postings",
    )
    tailor_parser.add_argument(
        "--corpus",
        type=Path,
        default=None,
        help="Path to the resume corpus (defaults to CORPUS_PATH)",
    )
    tailor_parser.add_argument(
        "--job-title",
        action="append",
        default=None,
        help="Target job title (once for all postings, or once per posting)",
    )
    tailor_parser.add_argument(
        "--company",
        action="append",
        default=None,
        help="Target company (once for all postings, or once per posting)",
    )
    tailor_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for rendered resumes (defaults to OUTPUT_DIR)",
    )
    tailor_parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=None,
        help="Output format (defaults to OUTPUT_FORMAT)",
    )
    tailor_parser.add_argument(
        "--template",
        type=Path,
        default=None,
        help="Jinja2 template for Markdown output (defaults to RESUME_TEMPLATE_PATH)",
    )
    tailor_parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write requirements, match scores and documents as JSON, one per posting",
    )

    # Extract mode
    extract_parser = subparsers.add_parser(
        "extract",
        help="Print the weighted requirements of a job posting",
    )
    extract_parser.add_argument(
        "--posting",
        required=True,
        help="Path to the job posting text ('-' reads stdin)",
    )

    # Corpus check mode
    check_parser = subparsers.add_parser(
        "check-corpus",
        help="Validate a resume corpus and report malformed records",
    )
    check_parser.add_argument(
        "--corpus",
        type=Path,
        default=None,
        help="Path to the resume corpus (defaults to CORPUS_PATH)",
    )

    return parser


def _build_provider(settings: Settings):
    from resume_builder.embeddings.provider import (
        LiteLLMEmbeddingProvider,
        RetryingEmbeddingProvider,
    )

    provider = LiteLLMEmbeddingProvider()
    if settings.embedding_retries > 0:
        return RetryingEmbeddingProvider(
            provider, max_retries=settings.embedding_retries
        )
    return provider


def _print_corpus_errors(corpus) -> None:
    for error in corpus.errors:
        print(f"Warning: corpus {error}", file=sys.stderr)


def _posting_label(source: str) -> str:
    return "stdin" if source == "-" else source


def _per_posting(values: list[str] | None, count: int, flag: str) -> list[str | None]:
    """Spread a repeatable option over the postings: once for all, or once each."""
    if not values:
        return [None] * count
    if len(values) == 1:
        return values * count
    if len(values) != count:
        raise ValueError(f"{flag} given {len(values)} times for {count} postings")
    return list(values)


def _build_renderer(parsed: argparse.Namespace, settings: Settings):
    """Pick the renderer for the run.

    Raises:
        FileNotFoundError: If a Markdown template was configured but is missing.
    """
    from resume_builder.rendering.renderer import JsonRenderer, MarkdownRenderer

    output_format = (
        OutputFormat(parsed.format) if parsed.format else settings.output_format
    )
    template = parsed.template or settings.resume_template_path

    if output_format == OutputFormat.JSON:
        if template is not None:
            print(
                f"Warning: template {template} ignored for json output",
                file=sys.stderr,
            )
        return JsonRenderer()

    if template is None:
        return MarkdownRenderer()
    if not template.is_file():
        raise FileNotFoundError(f"resume template not found: {template}")
    return MarkdownRenderer(template_dir=template.parent, template_name=template.name)


async def _run_tailor(
    parsed: argparse.Namespace, settings: Settings, postings: list[str]
) -> int:
    from resume_builder.corpus.store import CorpusStore
    from resume_builder.embeddings.store import EmbeddingStore
    from resume_builder.errors import ResumeBuilderError
    from resume_builder.pipeline.service import TailoringService
    from resume_builder.utils.concurrency import gather_or_cancel

    labels = [_posting_label(source) for source in parsed.posting]
    try:
        titles = _per_posting(parsed.job_title, len(postings), "--job-title")
        companies = _per_posting(parsed.company, len(postings), "--company")
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if len(postings) > 1:
        # Untitled postings are named after their file so each gets its own folder
        titles = [
            title or (None if source == "-" else Path(source).stem)
            for title, source in zip(titles, parsed.posting)
        ]
        targets = list(zip(companies, titles))
        if len(set(targets)) < len(targets):
            print(
                "Error: several postings share a company and job title; "
                "pass --job-title once per posting",
                file=sys.stderr,
            )
            return 1

    try:
        renderer = _build_renderer(parsed, settings)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    embedding_store = None
    if settings.embedding_store_path is not None:
        embedding_store = EmbeddingStore(settings.embedding_store_path)
        await embedding_store.initialize()

    try:
        provider = _build_provider(settings)
        try:
            corpus = CorpusStore(provider, embedding_store=embedding_store).load(
                parsed.corpus or settings.corpus_path
            )
        except ResumeBuilderError as e:
            print(f"{e.stage} failed: {e.message}", file=sys.stderr)
            return 1
        _print_corpus_errors(corpus)

        # One corpus handle, so each unit is embedded once across all postings
        service = TailoringService(provider, renderer=renderer)
        output_dir = parsed.output_dir or settings.output_dir
        results = await gather_or_cancel(
            service.tailor(
                posting,
                corpus,
                job_title=title,
                company=company,
                output_dir=output_dir,
            )
            for posting, title, company in zip(postings, titles, companies)
        )
    finally:
        if embedding_store is not None:
            await embedding_store.close()

    if parsed.report is not None:
        _write_json(
            parsed.report,
            [
                {
                    "posting": label,
                    "success": result.success,
                    "stage": result.stage,
                    "error": result.error,
                    "requirements": result.requirements,
                    "match_result": result.match_result,
                    "document": result.document,
                    "output_path": result.output_path,
                }
                for label, result in zip(labels, results)
            ],
        )

    exit_code = 0
    for label, result in zip(labels, results):
        prefix = f"{label}: " if len(results) > 1 else ""
        if not result.success:
            print(f"{prefix}{result.stage} failed: {result.error}", file=sys.stderr)
            exit_code = 1
            continue

        print(f"{prefix}Wrote: {result.output_path}")
        print(
            f"{prefix}Units: {len(result.document.unit_ids)} "
            f"({result.document.rendered_length}/"
            f"{result.document.page_budget_chars} chars)"
        )
    return exit_code


async def _run_extract(settings: Settings, posting: str) -> int:
    from resume_builder.errors import ResumeBuilderError
    from resume_builder.extractor.service import RequirementExtractor

    extractor = RequirementExtractor(_build_provider(settings))
    try:
        requirements = await extractor.extract(posting)
    except ResumeBuilderError as e:
        print(f"{e.stage} failed: {e.message}", file=sys.stderr)
        return 1

    print(json.dumps([r.to_dict() for r in requirements], indent=2))
    return 0


def _run_check_corpus(parsed: argparse.Namespace, settings: Settings) -> int:
    from resume_builder.corpus.store import CorpusStore
    from resume_builder.errors import ResumeBuilderError

    try:
        corpus = CorpusStore(_build_provider(settings)).load(
            parsed.corpus or settings.corpus_path
        )
    except ResumeBuilderError as e:
        print(f"{e.stage} failed: {e.message}", file=sys.stderr)
        return 1

    _print_corpus_errors(corpus)
    counts: dict[str, int] = {}
    for unit in corpus.all_units():
        counts[unit.category.value] = counts.get(unit.category.value, 0) + 1
    print(f"Units: {len(corpus)}")
    for category, count in counts.items():
        print(f"- {category}: {count}")
    return 1 if corpus.errors else 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    # Load settings
    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Configure logging
    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level)

    # If no mode specified, show help
    if parsed.mode is None:
        parser.print_help()
        return 0

    logger.info(f"Resume Builder v{__version__} starting in {parsed.mode} mode")

    if parsed.mode == "check-corpus":
        return _run_check_corpus(parsed, settings)

    sources = parsed.posting if parsed.mode == "tailor" else [parsed.posting]
    if sources.count("-") > 1:
        print("Error: stdin ('-') can only be read once", file=sys.stderr)
        return 1

    try:
        postings = [_read_posting(source) for source in sources]
    except OSError as e:
        print(f"Error reading posting: {e}", file=sys.stderr)
        return 1

    if parsed.mode == "extract":
        return asyncio.run(_run_extract(settings, postings[0]))

    if parsed.mode == "tailor":
        return asyncio.run(_run_tailor(parsed, settings, postings))

    return 0


if __name__ == "__main__":
    sys.exit(main())
