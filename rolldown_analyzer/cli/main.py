"""
Entry point for the rolldown-analyzer command.
Provides subcommands:
- generate – write a static analysis page (frontend + data) to a directory
- generate-data – write only the analysis document to a JSON file
- prepare – write rolldown-data.json into the working directory from LOGS_PATH/META_PATH
"""
import argparse
import sys
from pathlib import Path

from rolldown_analyzer.agent.engine import generate_data
from rolldown_analyzer.analyzers.logger_config import setup_logger
from rolldown_analyzer.cli.template import generate_template, write_data_file
from rolldown_analyzer.config import AnalyzerConfig
from rolldown_analyzer.errors import AnalyzerError

logger = setup_logger(__name__)


def build_parser(config: AnalyzerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rolldown-analyzer", description="Standalone Analyzer for Rolldown")
    sub = parser.add_subparsers(dest="command", required=True)

    generate = sub.add_parser("generate", help="Generate static analysis page")
    generate.add_argument("--logs", required=True, help="Path to logs.json")
    generate.add_argument("--meta", required=True, help="Path to meta.json")
    generate.add_argument("-o", "--out-dir", required=True, help="Output directory")
    generate.add_argument("--public-dir", default=str(config.public_dir),
                          help="Prebuilt frontend to copy into the output directory")

    generate_data_cmd = sub.add_parser("generate-data", help="Generate analysis data as JSON")
    generate_data_cmd.add_argument("--logs", required=True, help="Path to logs.json")
    generate_data_cmd.add_argument("--meta", required=True, help="Path to meta.json")
    generate_data_cmd.add_argument("-o", "--out-file", required=True, help="Output JSON file path")
    generate_data_cmd.add_argument("--strict", action="store_true",
                                   help="Fail on orphaned calls and unknown chunk references")

    prepare = sub.add_parser("prepare", help="Write rolldown-data.json into the working directory")
    prepare.add_argument("--force", action="store_true", help="Regenerate even if the file exists")

    return parser


def run(args, config: AnalyzerConfig) -> int:
    if args.command == "generate":
        generate_template(
            logs_path=Path(args.logs).resolve(),
            meta_path=Path(args.meta).resolve(),
            out_dir=Path(args.out_dir).resolve(),
            public_dir=Path(args.public_dir),
        )
        print(f"Generated static analysis page in {args.out_dir}")
        return 0

    if args.command == "generate-data":
        data = generate_data(Path(args.logs).resolve(), Path(args.meta).resolve(), strict=args.strict)
        write_data_file(data, Path(args.out_file).resolve())
        print(f"Generated analysis data at {args.out_file}")
        return 0

    if args.command == "prepare":
        data_path = Path.cwd() / config.data_file_name
        if data_path.exists() and not args.force:
            logger.info(f"{data_path} already exists, nothing to do.")
            return 0
        logs_path, meta_path = config.require_inputs()
        write_data_file(generate_data(logs_path, meta_path), data_path)
        print("Data generated successfully")
        return 0

    return 2


def main(argv: list[str] | None = None) -> int:
    config = AnalyzerConfig.from_env()
    parser = build_parser(config)
    args = parser.parse_args(argv)

    try:
        return run(args, config)
    except (AnalyzerError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
