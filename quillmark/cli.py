"""
Command line access to the document toolkit and the editor.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from quillmark.core.document import operations
from quillmark.core.errors import QuillmarkError
from quillmark.utils import setup_logging

log = logging.getLogger(__name__)


def _read(path: str) -> bytes:
    return Path(path).read_bytes()


def _write_pages(pages: List[bytes], out_dir: str, stem: str, suffix: str) -> None:
    target = Path(out_dir)
    target.mkdir(parents=True, exist_ok=True)
    for number, data in enumerate(pages, start=1):
        (target / f"{stem}_{number}{suffix}").write_bytes(data)
    print(f"Wrote {len(pages)} file(s) to {target}")


def cmd_merge(args: argparse.Namespace) -> None:
    data = operations.merge([(Path(p).name, _read(p)) for p in args.inputs])
    Path(args.output).write_bytes(data)
    print(f"Merged {len(args.inputs)} files into {args.output}")


def cmd_split(args: argparse.Namespace) -> None:
    _write_pages(operations.split(_read(args.input)), args.out_dir, Path(args.input).stem, ".pdf")


def cmd_rotate(args: argparse.Namespace) -> None:
    Path(args.output).write_bytes(operations.rotate(_read(args.input), args.degrees))
    print(f"Rotated {args.input} by {args.degrees} degrees")


def cmd_images_to_pdf(args: argparse.Namespace) -> None:
    data = operations.images_to_pdf([(Path(p).name, _read(p)) for p in args.images])
    Path(args.output).write_bytes(data)
    print(f"Wrote {args.output}")


def cmd_pdf_to_images(args: argparse.Namespace) -> None:
    pages = operations.pdf_to_images(_read(args.input), args.scale)
    _write_pages(pages, args.out_dir, Path(args.input).stem, ".png")


def cmd_compress(args: argparse.Namespace) -> None:
    result = operations.compress(_read(args.input))
    Path(args.output).write_bytes(result.data)
    print(
        f"{result.original_size / 1024:.1f} KB -> {result.compressed_size / 1024:.1f} KB "
        f"({result.reduction:.1f}% reduction)"
    )


def cmd_edit(args: argparse.Namespace) -> None:
    from quillmark.main import main as run_editor

    argv = [sys.argv[0]] + ([args.input] if args.input else [])
    sys.exit(run_editor(argv))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("quillmark")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    sub = parser.add_subparsers(dest="cmd")

    sp = sub.add_parser("merge", help="concatenate PDFs")
    sp.add_argument("inputs", nargs="+")
    sp.add_argument("-o", "--output", required=True)
    sp.set_defaults(func=cmd_merge)

    sp = sub.add_parser("split", help="one PDF per page")
    sp.add_argument("input")
    sp.add_argument("-d", "--out-dir", default=".")
    sp.set_defaults(func=cmd_split)

    sp = sub.add_parser("rotate", help="rotate every page")
    sp.add_argument("input")
    sp.add_argument("--degrees", type=int, choices=(90, 180, 270), default=90)
    sp.add_argument("-o", "--output", required=True)
    sp.set_defaults(func=cmd_rotate)

    sp = sub.add_parser("images-to-pdf", help="PNG/JPEG images to one PDF")
    sp.add_argument("images", nargs="+")
    sp.add_argument("-o", "--output", required=True)
    sp.set_defaults(func=cmd_images_to_pdf)

    sp = sub.add_parser("pdf-to-images", help="render pages to PNG")
    sp.add_argument("input")
    sp.add_argument("-d", "--out-dir", default=".")
    sp.add_argument("--scale", type=float, default=2.0)
    sp.set_defaults(func=cmd_pdf_to_images)

    sp = sub.add_parser("compress", help="re-save with garbage collection and deflate")
    sp.add_argument("input")
    sp.add_argument("-o", "--output", required=True)
    sp.set_defaults(func=cmd_compress)

    sp = sub.add_parser("edit", help="open the annotation editor")
    sp.add_argument("input", nargs="?")
    sp.set_defaults(func=cmd_edit)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    # No sub-command behaves like `quillmark edit`
    if not getattr(args, "func", None):
        args = parser.parse_args(["edit"])

    if args.func is not cmd_edit:
        setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        args.func(args)
    except (OSError, ValueError, QuillmarkError) as e:
        log.error("%s failed: %s", args.cmd, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
