import argparse, pathlib, sys

from draftvista.config import Config
from draftvista.errors import DraftVistaError
from draftvista.llm.base import LLMClient
from draftvista.logging_config import setup_logging
from draftvista.pipeline import AnalysisPipeline
from draftvista.schemas import AnalysisType


def run_analyze(args, cfg: Config) -> int:
    comments = args.comments
    if args.comments_file:
        try:
            comments = pathlib.Path(args.comments_file).read_text(encoding="utf-8")
        except OSError as e:
            print(f"Error: cannot read comments file {args.comments_file}: {e.strerror or e}", file=sys.stderr)
            return 1

    try:
        llm = LLMClient(model_name=args.model or cfg.model_name)
        pipeline = AnalysisPipeline(llm, config=cfg)
        response = pipeline.run(args.manuscript, args.journal_url, AnalysisType(args.type),
                                reviewer_comments=comments)
    except DraftVistaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    payload = response.model_dump_json(indent=2, by_alias=True)
    if args.output:
        pathlib.Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Saved to {args.output}")
    else:
        print(payload)
    if response.analysis.is_mock:
        print("Warning: the AI service was unreachable; this is a placeholder analysis.", file=sys.stderr)
    return 0


def run_serve(args, cfg: Config) -> int:
    # Imported here so `analyze` does not need the web stack
    from draftvista.api import create_app
    from draftvista.services.uploads import UploadSweeper

    app = create_app(cfg)
    sweeper = UploadSweeper(cfg.upload_dir, cfg.cleanup_interval_hours, cfg.cleanup_max_age_hours).start()
    try:
        app.run(host=args.host, port=args.port or cfg.port)
    finally:
        sweeper.stop(timeout=1)
    return 0


def main(argv=None):
    ap = argparse.ArgumentParser(prog="draftvista", description="AI review of a manuscript against a target journal.")
    sub = ap.add_subparsers(dest="command", required=True)

    an = sub.add_parser("analyze", help="Analyze a local manuscript file and print the JSON result.")
    an.add_argument("manuscript", type=str, help="Path to a .pdf, .docx or .doc manuscript")
    an.add_argument("journal_url", type=str, help="Homepage of the target journal")
    an.add_argument("--type", choices=[t.value for t in AnalysisType], default=AnalysisType.PRE_SUBMISSION.value)
    an.add_argument("--comments", type=str, help="Reviewer comments (post-rejection only)")
    an.add_argument("--comments_file", type=str, help="File holding the reviewer comments")
    an.add_argument("--model", type=str, help="Override GEMINI_MODEL")
    an.add_argument("--output", type=str, help="Write the JSON here instead of stdout")

    sv = sub.add_parser("serve", help="Run the HTTP API with the upload sweeper.")
    sv.add_argument("--host", type=str, default="127.0.0.1")
    sv.add_argument("--port", type=int, help="Defaults to PORT or 3001")

    args = ap.parse_args(argv)

    cfg = Config.from_env()
    setup_logging(cfg.log_level)

    if args.command == "analyze":
        return run_analyze(args, cfg)
    return run_serve(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
