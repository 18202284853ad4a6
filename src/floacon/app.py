from __future__ import annotations

import argparse
import sys
from typing import Sequence, TextIO

from .bits import clean_input
from .datatypes import PRESETS, FormatParams, find_preset
from .session import FloatSession

DEFAULT_PRESET = "binary32"


def _add_format_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-p",
        "--preset",
        help=f"preset format name (default: {DEFAULT_PRESET})",
    )
    parser.add_argument("-e", "--exponent-bits", type=int, help="exponent width")
    parser.add_argument("-m", "--mantissa-bits", type=int, help="mantissa width")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="floacon",
        description="Convert decimals to and from custom binary floating-point formats.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    encode_cmd = commands.add_parser("encode", help="decimal -> bits")
    # Optional here so "-inf" or "-1e400" can be picked up from the leftovers.
    encode_cmd.add_argument("value", nargs="?", help="decimal, inf/infinity or nan")
    _add_format_arguments(encode_cmd)

    decode_cmd = commands.add_parser("decode", help="bits or 0x-hex -> decimal")
    decode_cmd.add_argument("bits", help="bit string (spaces/_ allowed) or 0x hex")
    _add_format_arguments(decode_cmd)

    info_cmd = commands.add_parser("info", help="format characteristics")
    _add_format_arguments(info_cmd)

    commands.add_parser("presets", help="list preset formats")
    return parser


def session_from_args(args: argparse.Namespace) -> FloatSession:
    if args.preset is not None:
        preset = find_preset(args.preset)
        exponent_bits, mantissa_bits = preset.exponent_bits, preset.mantissa_bits
    else:
        default = PRESETS[DEFAULT_PRESET]
        exponent_bits, mantissa_bits = default.exponent_bits, default.mantissa_bits
    if args.exponent_bits is not None:
        exponent_bits = args.exponent_bits
    if args.mantissa_bits is not None:
        mantissa_bits = args.mantissa_bits
    return FloatSession(exponent_bits, mantissa_bits)


def format_params_title(params: FormatParams) -> str:
    return (
        f"FlexFloat-{params.total_bits} "
        f"(exponent {params.exponent_bits}, mantissa {params.mantissa_bits})"
    )


def render_value(session: FloatSession) -> str:
    decoded = session.decoded
    lines = [
        format_params_title(session.params),
        f"Binary:         {session.binary}",
        f"Hex:            {session.hex}",
        f"Decimal value:  {decoded.decimal_value}",
        f"Classification: {decoded.classification}",
    ]
    return "\n".join(lines)


def render_info(session: FloatSession) -> str:
    info = session.characteristics
    bias = int(info.bias)
    lines = [
        format_params_title(session.params),
        f"Total bits:     {info.total_bits}",
        f"Exponent bias:  {bias} (0x{bias:X})",
        f"Epsilon:        {info.epsilon}",
        f"Max normal:     {info.max_normal}",
        f"Min normal:     {info.min_normal}",
        f"Min denormal:   {info.min_denormal}",
    ]
    return "\n".join(lines)


def render_presets() -> str:
    width = max(len(name) for name in PRESETS)
    return "\n".join(
        f"{name.ljust(width)}  {preset.label} "
        f"[e={preset.exponent_bits}, m={preset.mantissa_bits}]"
        for name, preset in PRESETS.items()
    )


def run(args: argparse.Namespace) -> str:
    if args.command == "presets":
        return render_presets()

    session = session_from_args(args)
    if args.command == "encode":
        session.convert(args.value)
        return render_value(session)
    if args.command == "decode":
        source = clean_input(args.bits)
        if source[:2].lower() == "0x":
            session.load_hex(source)
        else:
            session.load_bits(source)
        return render_value(session)
    return render_info(session)


def parse_arguments(
    parser: argparse.ArgumentParser, argv: Sequence[str] | None
) -> argparse.Namespace:
    args, extras = parser.parse_known_args(argv)
    if args.command == "encode" and args.value is None and len(extras) == 1:
        args.value = extras.pop()
    if extras:
        parser.error(f"unrecognized arguments: {' '.join(extras)}")
    if args.command == "encode" and args.value is None:
        parser.error("encode: a value is required")
    return args


def main(
    argv: Sequence[str] | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    out = stdout or sys.stdout
    err = stderr or sys.stderr
    parser = build_parser()
    args = parse_arguments(parser, argv)
    try:
        text = run(args)
    except (ValueError, IndexError) as exc:
        print(f"error: {exc}", file=err)
        return 2
    print(text, file=out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
