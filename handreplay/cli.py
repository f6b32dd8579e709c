"""
Command line entry point.

    handreplay parse FILE [--json]
    handreplay check FILE
    handreplay replay FILE [--hand N] [--steps K | --autoplay]
    handreplay serve [--host H] [--port P]
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import List, Optional

import bittensor as bt

from handreplay import __version__
from handreplay.core.consistency import check_hands
from handreplay.core.models import Hand
from handreplay.parser.hand_parser import HandFileError, parse_file
from handreplay.replay.replayer import Autoplayer, Replayer
from handreplay.utils.config import load_replayer_env

NO_HANDS_MESSAGE = "No hands found. Is this the correct hand-history format?"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="handreplay", description="Parse and replay poker hand histories.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--trace", action="store_true", help="Enable trace logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="Parse a hand-history file and list its hands")
    p_parse.add_argument("file", type=Path)
    p_parse.add_argument("--json", action="store_true", help="Print every hand as JSON")

    p_check = sub.add_parser("check", help="Report inconsistencies in parsed hands")
    p_check.add_argument("file", type=Path)

    p_replay = sub.add_parser("replay", help="Step through one hand")
    p_replay.add_argument("file", type=Path)
    p_replay.add_argument("--hand", type=int, default=0, help="Index in the parsed list (0 is the oldest hand)")
    p_replay.add_argument("--steps", type=int, default=None, help="Stop after this many forward steps")
    p_replay.add_argument("--autoplay", action="store_true", help="Step on a timer instead of as fast as possible")

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)
    return parser


def _load(path: Path) -> List[Hand]:
    hands = parse_file(path)
    if not hands:
        raise HandFileError(NO_HANDS_MESSAGE)
    return hands


def _describe(hand: Hand) -> str:
    winners = ", ".join(f"{w.player} {w.amount}" for w in hand.winners) or "-"
    board = " ".join(hand.board) or "-"
    return f"#{hand.hand_id or '?'} bb={hand.big_blind} players={len(hand.players)} board={board} winners={winners}"


def _view_line(replayer: Replayer) -> str:
    view = replayer.view()
    line = f"{view['street']}:{view['action_index']} pot={view['pot_label']}"
    if view["next_to_act"]:
        line += f" next={view['next_to_act']}"
    if view["award_phase"] != "none":
        award = ", ".join(f"{p} {amt}" for p, amt in view["award"].items())
        line += f" award[{view['award_phase']}]={award}"
    return line


def cmd_parse(args: argparse.Namespace) -> int:
    hands = _load(args.file)
    if args.json:
        print(json.dumps([h.to_payload() for h in hands], indent=2))
        return 0
    for idx, hand in enumerate(hands):
        print(f"{idx}: {_describe(hand)}")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    hands = _load(args.file)
    errors = check_hands(hands, source=args.file.name)
    if errors:
        print("Inconsistencies found:")
        for err in errors:
            print(" -", err)
        print(f"Total errors: {len(errors)}")
        return 1
    print(f"No inconsistencies in {len(hands)} hands.")
    return 0


def cmd_replay(args: argparse.Namespace) -> int:
    hands = _load(args.file)
    if not 0 <= args.hand < len(hands):
        print(f"Hand index {args.hand} out of range (0..{len(hands) - 1})", file=sys.stderr)
        return 2
    replayer = Replayer(hands[args.hand])
    print(_describe(replayer.hand))
    print(_view_line(replayer))

    if args.autoplay:
        config = load_replayer_env()

        def on_step(rep: Replayer) -> None:
            print(_view_line(rep))

        player = Autoplayer(replayer, interval_s=config.autoplay_interval_s, on_step=on_step)
        player.start()
        while player.playing:
            time.sleep(config.autoplay_interval_s)
        return 0

    steps = 0
    while args.steps is None or steps < args.steps:
        if not replayer.step_forward():
            break
        steps += 1
        print(_view_line(replayer))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    config = load_replayer_env()
    host = args.host or config.api_host
    port = args.port or config.api_port
    bt.logging.info(f"Serving handreplay API on {host}:{port}")
    uvicorn.run("handreplay.api.app:app", host=host, port=port)
    return 0


COMMANDS = {
    "parse": cmd_parse,
    "check": cmd_check,
    "replay": cmd_replay,
    "serve": cmd_serve,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.trace:
        bt.logging.set_trace()
    elif args.debug:
        bt.logging.set_debug()
    try:
        return COMMANDS[args.command](args)
    except HandFileError as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
