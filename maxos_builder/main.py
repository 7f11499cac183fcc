import argparse
from pathlib import Path

from maxos_builder.__version__ import __version__
from maxos_builder.build import BuildError
from maxos_builder.build.pipeline import acquire_pipeline, clean_pipeline, run_pipeline
from maxos_builder.config import load_config
from maxos_builder.logging import LoggerFactory, setup_logging


def build_parser():
    parser = argparse.ArgumentParser(
        prog="maxos-builder",
        description="Build a bootable MaxOS ISO with Limine and run it in QEMU",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable verbose debug output")
    parser.add_argument("--trace", action="store_true", help="Log captured tool output too")
    parser.add_argument("--config", type=Path, help="JSON file overriding build paths and tools")
    parser.add_argument("--root", type=Path, help="Project root the build paths are relative to")
    parser.add_argument("--log-dir", type=Path, help="Directory for log files")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True
    commands.add_parser(
        "acquire-bootloader",
        aliases=["limine"],
        help="Clone Limine if needed and build it",
    )
    commands.add_parser("clean", help="Remove the output directory")
    run_parser = commands.add_parser(
        "run",
        help="Stage a kernel, master the ISO and boot it in QEMU",
    )
    run_parser.add_argument("binary_file", type=Path, help="Path to the kernel binary")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(debug=args.debug, trace=args.trace, log_dir=args.log_dir)
    log = LoggerFactory.for_system()

    try:
        config = load_config(args.config, root=args.root)
    except BuildError as error:
        log.error(str(error))
        return 1

    if args.command == "clean":
        pipeline = clean_pipeline(config)
    elif args.command == "run":
        pipeline = run_pipeline(config, args.binary_file)
    else:
        pipeline = acquire_pipeline(config)

    try:
        report = pipeline.execute()
    except KeyboardInterrupt:
        log.warning(f"{args.command} interrupted")
        return 130
    failed = report.failed_step
    if failed is not None:
        log.error(f"{report.name}: step '{failed.name}' failed: {failed.error}")
        return report.exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
