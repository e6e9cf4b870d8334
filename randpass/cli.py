"""CLI for randpass: generate, check, config (show/save)."""

import argparse
import json
import logging
import sys

from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .classify import CharClass
from .config import load_config, save_config, options_from_config
from .errors import InvalidOptionsError
from .options import GenerationOptions, check_options, normalize
from .service import STATUS_TIMEOUT, generator_for_config, run_generate_request
from .validator import count_classes, is_valid

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_TIMEOUT = 2


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

def _options_from_args(args, cfg) -> GenerationOptions:
    """Configured defaults overridden by whatever flags were given."""
    options = options_from_config(cfg)
    changes = {}
    if args.length is not None:
        changes["password_length"] = args.length
    if args.no_upper:
        changes["use_uppercase"] = False
    if args.no_lower:
        changes["use_lowercase"] = False
    if args.no_digits:
        changes["use_digits"] = False
    if args.no_symbols:
        changes["use_symbols"] = False
    if args.symbols is not None:
        changes["symbols"] = args.symbols
    if args.min_digits is not None:
        changes["min_digit_proportion"] = args.min_digits
    if args.min_symbols is not None:
        changes["min_symbol_proportion"] = args.min_symbols
    if args.max_case_variance is not None:
        changes["max_case_variance"] = args.max_case_variance
    options = normalize(options.replace(**changes))
    check_options(options)
    return options

def cmd_generate(args, cfg) -> int:
    try:
        options = _options_from_args(args, cfg)
    except InvalidOptionsError as e:
        print(f"[red]Invalid options: {escape(str(e))}[/red]")
        return EXIT_ERROR
    try:
        timeout = args.timeout if args.timeout is not None else float(cfg["timeout_seconds"])
        generator = generator_for_config(cfg)
    except (TypeError, ValueError) as e:
        print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        return EXIT_ERROR
    for i in range(args.copies):
        result = run_generate_request(options, timeout, generator)
        if result.ok:
            print(f"[bold green]Password #{i+1}:[/bold green] {escape(result.password)}")
        elif result.status == STATUS_TIMEOUT:
            print(f"[yellow]Timed out after {timeout:g}s; try relaxing the options.[/yellow]")
            return EXIT_TIMEOUT
        else:
            print(f"[red]Failed to generate password: {escape(result.message or '')}[/red]")
            return EXIT_ERROR
    return EXIT_OK

def cmd_check(args, cfg) -> int:
    try:
        options = _options_from_args(args, cfg)
    except InvalidOptionsError as e:
        print(f"[red]Invalid options: {escape(str(e))}[/red]")
        return EXIT_ERROR
    pw = args.password
    counts = count_classes(pw)
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Class")
    table.add_column("Count", justify="right")
    for cls in CharClass:
        table.add_row(cls.value, str(counts[cls]))
    print(table)
    if is_valid(pw, options):
        print(Panel("Password satisfies the options.", title="[green]Valid[/green]"))
        return EXIT_OK
    print(Panel("Password does not satisfy the options.", title="[red]Invalid[/red]"))
    return EXIT_ERROR

def cmd_config_show(args, cfg) -> int:
    print(Panel(escape(json.dumps(cfg, indent=2)), title="Configuration"))
    return EXIT_OK

def cmd_config_save(args, cfg) -> int:
    try:
        options = _options_from_args(args, cfg)
    except InvalidOptionsError as e:
        print(f"[red]Invalid options: {escape(str(e))}[/red]")
        return EXIT_ERROR
    cfg["options"] = options.to_dict()
    if args.timeout is not None:
        cfg["timeout_seconds"] = args.timeout
    path = save_config(cfg, args.config)
    print(f"[green]Saved configuration to:[/green] {escape(path)}")
    return EXIT_OK

def _add_option_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--length", type=int, help="Password length")
    p.add_argument("--no-symbols", action="store_true", help="Disable symbols")
    p.add_argument("--no-upper", action="store_true", help="Disable uppercase")
    p.add_argument("--no-lower", action="store_true", help="Disable lowercase")
    p.add_argument("--no-digits", action="store_true", help="Disable digits")
    p.add_argument("--symbols", type=str, help="Symbol characters to draw from")
    p.add_argument("--min-digits", type=float, help="Minimum proportion of digits (0-1)")
    p.add_argument("--min-symbols", type=float, help="Minimum proportion of symbols (0-1)")
    p.add_argument("--max-case-variance", type=float,
                   help="Maximum upper/lower case imbalance (0 balanced, 1 any)")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="randpass")
    parser.add_argument("--config", "-c", type=str, help="Path to config file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    gen = sub.add_parser("generate", help="Generate one or more passwords")
    _add_option_flags(gen)
    gen.add_argument("--timeout", type=float, help="Seconds to try before giving up")
    gen.add_argument("--copies", type=int, default=1, help="How many passwords to generate")
    gen.set_defaults(func=cmd_generate)

    chk = sub.add_parser("check", help="Check a password against the options")
    chk.add_argument("password", type=str, help="Password to check (wrap in quotes)")
    _add_option_flags(chk)
    chk.set_defaults(func=cmd_check)

    c = sub.add_parser("config", help="Configuration")
    csub = c.add_subparsers(dest="ccmd", required=True)

    c_show = csub.add_parser("show", help="Print the effective configuration")
    c_show.set_defaults(func=cmd_config_show)

    c_save = csub.add_parser("save", help="Save the given options as new defaults")
    _add_option_flags(c_save)
    c_save.add_argument("--timeout", type=float, help="Default timeout in seconds")
    c_save.set_defaults(func=cmd_config_save)
    return parser

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    cfg = load_config(args.config)
    return args.func(args, cfg)

if __name__ == "__main__":
    sys.exit(main())
