from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from .config import ConfigManager, RecorderConfig
from .exceptions import PcmWavError
from .logging_config import configure_from_env, get_logger
from .resample import resample_channels
from .volume import volume_level
from .wav import decode, encode_channels, merge_containers, read_container, split_container

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pcmwav", description="PCM WAV conversion tools")
    parser.add_argument("--config", default="", help="JSON config file with default rate/bit depth")
    sub = parser.add_subparsers(dest="command", required=True)

    info = sub.add_parser("info", help="Print WAV header fields")
    info.add_argument("input")

    convert = sub.add_parser("convert", help="Resample and/or change bit depth")
    convert.add_argument("input")
    convert.add_argument("output")
    convert.add_argument("--rate", type=int, default=None, help="Output sample rate")
    convert.add_argument("--bit-depth", type=int, choices=[8, 16], default=None)

    split = sub.add_parser("split", help="Split a multi-channel WAV into mono files")
    split.add_argument("input")
    split.add_argument("--output-dir", default="", help="Defaults to the input's directory")

    merge = sub.add_parser("merge", help="Merge WAV files into one multi-channel WAV")
    merge.add_argument("inputs", nargs="+")
    merge.add_argument("-o", "--output", required=True)
    merge.add_argument("--rate", type=int, default=None, help="Output sample rate")
    merge.add_argument("--bit-depth", type=int, choices=[8, 16], default=None)

    level = sub.add_parser("level", help="Print the 0-100 volume level of a WAV")
    level.add_argument("input")

    return parser


def _load_config(path: str) -> RecorderConfig:
    if not path:
        return RecorderConfig()
    return ConfigManager.load_recorder_config(path)


def _info(args: argparse.Namespace, config: RecorderConfig) -> dict[str, Any]:
    header = read_container(Path(args.input).read_bytes()).header
    return {
        "sample_rate": header.sample_rate,
        "channels": header.channel_count,
        "bit_depth": header.bit_depth,
        "byte_order": "little" if header.little_endian else "big",
        "data_length": header.data_length,
        "frames": header.frame_count,
        "duration": round(header.duration, 3),
    }


def _convert(args: argparse.Namespace, config: RecorderConfig) -> dict[str, Any]:
    raw = Path(args.input).read_bytes()
    bit_depth = args.bit_depth or read_container(raw).header.bit_depth
    buffers, sample_rate = decode(raw)
    rate = sample_rate if args.rate is None else args.rate
    data = encode_channels(
        resample_channels(buffers, sample_rate, rate),
        rate,
        bit_depth,
        little_endian=config.little_endian,
    )
    Path(args.output).write_bytes(data)
    return {"output": args.output, "sample_rate": rate, "bit_depth": bit_depth, "bytes": len(data)}


def _split(args: argparse.Namespace, config: RecorderConfig) -> dict[str, Any]:
    src = Path(args.input)
    out_dir = Path(args.output_dir) if args.output_dir else src.parent
    out_dir.mkdir(parents=True, exist_ok=True)

    outputs = []
    for index, data in enumerate(split_container(src.read_bytes(), little_endian=config.little_endian)):
        path = out_dir / f"{src.stem}_ch{index}.wav"
        path.write_bytes(data)
        outputs.append(str(path))
    return {"outputs": outputs}


def _merge(args: argparse.Namespace, config: RecorderConfig) -> dict[str, Any]:
    rate = config.output_sample_rate if args.rate is None else args.rate
    bit_depth = args.bit_depth or config.bit_depth
    data = merge_containers(
        [Path(p).read_bytes() for p in args.inputs],
        rate,
        bit_depth,
        little_endian=config.little_endian,
    )
    Path(args.output).write_bytes(data)
    return {
        "output": args.output,
        "channels": read_container(data).header.channel_count,
        "sample_rate": rate,
        "bit_depth": bit_depth,
    }


def _level(args: argparse.Namespace, config: RecorderConfig) -> dict[str, Any]:
    buffers, _ = decode(Path(args.input).read_bytes())
    return {"level": volume_level(buffers)}


_COMMANDS = {
    "info": _info,
    "convert": _convert,
    "split": _split,
    "merge": _merge,
    "level": _level,
}


def main(argv: list[str] | None = None) -> None:
    configure_from_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args.config)
        output = _COMMANDS[args.command](args, config)
    except (PcmWavError, OSError) as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        parser.exit(1, f"pcmwav {args.command}: {exc}\n")

    print(json.dumps(output, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
