from __future__ import annotations

import argparse
import json
import random
import sys
from dataclasses import replace
from pathlib import Path

from .calculator import Outcome, try_calculate
from .config import AppConfig, LOG_LEVELS, default_config_path, load_config, save_config
from .logger import setup_logging


def format_outcome(outcome: Outcome, *, as_json: bool = False, show_tokens: bool = False) -> str:
    if as_json:
        data = outcome.to_dict()
        if show_tokens:
            data["tokens"] = [{"kind": t.kind.value, "text": t.text} for t in outcome.tokens]
        return json.dumps(data, ensure_ascii=False, sort_keys=True)

    lines: list[str] = []
    if show_tokens:
        lines.append("tokens: " + " ".join(repr(t) for t in outcome.tokens))
    if outcome.result is not None:
        r = outcome.result
        lines.append(
            f"{r.text} => min {r.min}, max {r.max}, avg {r.average:g}, rolled {r.generated}"
        )
    elif outcome.error is not None:
        lines.append(f"error ({outcome.error.kind.value}): {outcome.error}")
    return "\n".join(lines)


def _load(args: argparse.Namespace) -> AppConfig:
    cfg_path = Path(args.config) if getattr(args, "config", None) else None
    cfg = load_config(cfg_path)
    setup_logging(args.log_level or cfg.log_level)
    return cfg


def _rng_for(args: argparse.Namespace, cfg: AppConfig) -> random.Random | None:
    seed = args.seed if args.seed is not None else cfg.calculator.seed
    return random.Random(seed) if seed is not None else None


def _cmd_calc(args: argparse.Namespace) -> int:
    cfg = _load(args)
    request = " ".join(args.request)
    outcome = try_calculate(request, rng=_rng_for(args, cfg))

    as_json = bool(args.json) or cfg.calculator.output == "json"
    show_tokens = bool(args.tokens) or cfg.calculator.show_tokens
    text = format_outcome(outcome, as_json=as_json, show_tokens=show_tokens)

    if outcome.ok or as_json:
        print(text)
    else:
        print(text, file=sys.stderr)
    return 0 if outcome.ok else 1


def _print_help_in_repl() -> None:
    print("Say or type a formula, e.g. 3d8 + 1. Commands: /help, /exit")


def _cmd_repl(args: argparse.Namespace) -> int:
    cfg = _load(args)
    # One generator for the whole session, so a seed gives a reproducible sequence.
    rng = _rng_for(args, cfg)
    as_json = cfg.calculator.output == "json"

    _print_help_in_repl()

    while True:
        try:
            line = input("dice> ").strip()
        except EOFError:
            print("")
            break

        if not line:
            continue
        if line in {"/exit", "/quit"}:
            break
        if line in {"/help", "help", "?"}:
            _print_help_in_repl()
            continue

        outcome = try_calculate(line, rng=rng)
        print(format_outcome(outcome, as_json=as_json, show_tokens=cfg.calculator.show_tokens))

    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    path = Path(args.path) if args.path else default_config_path()
    cfg = load_config(path)

    if args.print_json or path.exists():
        print(json.dumps(cfg.to_dict(), ensure_ascii=False, indent=2, sort_keys=True))
        return 0

    save_config(cfg, path)
    print(f"Saved: {path}")
    return 0


def _cmd_web(args: argparse.Namespace) -> int:
    # The HTTP API is an optional extra.
    from .web.server import serve

    cfg = _load(args)
    cfg_path = Path(args.config) if args.config else None
    web = replace(
        cfg.web,
        host=str(args.host or cfg.web.host),
        port=int(args.port or cfg.web.port),
        open_browser=cfg.web.open_browser and not bool(args.no_open),
    )
    try:
        return int(serve(web, config_path=cfg_path, log_level=args.log_level or cfg.log_level))
    except RuntimeError as e:
        print(str(e), file=sys.stderr)
        return 2


def build_parser() -> argparse.ArgumentParser:
    # Let argparse pick up the actual invoked command name.
    p = argparse.ArgumentParser(description="Dice formula calculator for spoken requests")
    p.add_argument("--log-level", choices=LOG_LEVELS, type=str.upper, help="Override the configured log level")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_calc = sub.add_parser("calc", help="Evaluate one formula, e.g. 'three d8 plus 1'")
    p_calc.add_argument("request", nargs="+")
    p_calc.add_argument("--seed", type=int)
    p_calc.add_argument("--json", action="store_true", help="Print the result as JSON")
    p_calc.add_argument("--tokens", action="store_true", help="Also print the token sequence")
    p_calc.add_argument("--config", help="Config file path")
    p_calc.set_defaults(func=_cmd_calc)

    p_repl = sub.add_parser("repl", help="Evaluate formulas line by line")
    p_repl.add_argument("--seed", type=int)
    p_repl.add_argument("--config", help="Config file path")
    p_repl.set_defaults(func=_cmd_repl)

    p_cfg = sub.add_parser("config", help="Print the effective config or write defaults")
    p_cfg.add_argument("--path", help="Config file path")
    p_cfg.add_argument("--print-json", action="store_true")
    p_cfg.set_defaults(func=_cmd_config)

    p_web = sub.add_parser("web", help="Start the local HTTP API")
    p_web.add_argument("--host")
    p_web.add_argument("--port", type=int)
    p_web.add_argument("--config", help="Config file path")
    p_web.add_argument("--no-open", action="store_true", help="Do not open a browser")
    p_web.set_defaults(func=_cmd_web)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    p = build_parser()
    args = p.parse_args(argv)
    func = getattr(args, "func", None)
    if not func:
        p.print_help()
        return 2
    return int(func(args))


if __name__ == "__main__":
    sys.exit(main())
