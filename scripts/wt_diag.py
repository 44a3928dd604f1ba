"""wtlaunch diagnostics CLI."""

from __future__ import annotations

import argparse
import asyncio
import json

from wtlaunch.adapters import AerospaceInventory, TmuxClient
from wtlaunch.config import WtLaunchSettings
from wtlaunch.naming import normalize
from wtlaunch.profiles import LaunchProfile, ProfileLoadError, ProfileLoader
from wtlaunch.sessions import session_ordinal
from wtlaunch.shell import CommandRunner


def load_profile(settings: WtLaunchSettings, profile_id: str | None = None) -> LaunchProfile:
    try:
        return ProfileLoader(settings.profile_paths).get(profile_id or settings.profile)
    except ProfileLoadError as exc:
        print(f"Profile unavailable: {exc}")
        raise SystemExit(1)


def cmd_deps(args: argparse.Namespace) -> None:
    settings = WtLaunchSettings()
    profile = load_profile(settings, args.profile)
    runner = CommandRunner()
    tools = ["git", "tmux", *profile.required_tools(), "aerospace"]
    payload: dict[str, str | None] = {}
    for tool in tools:
        path = runner.which(tool)
        payload[tool] = str(path) if path is not None else None
    print(json.dumps(payload, indent=2))
    required = tools[:-1]
    if any(payload[tool] is None for tool in required):
        raise SystemExit(1)


def cmd_names(args: argparse.Namespace) -> None:
    settings = WtLaunchSettings()
    profile = load_profile(settings, args.profile)
    payload = []
    for branch in args.branches:
        names = normalize(branch, profile.category_prefixes)
        payload.append(
            {
                "branch": names.branch,
                "safe": names.safe,
                "label": names.label,
                "ticket_id": names.ticket_id,
            }
        )
    print(json.dumps(payload, indent=2))


def cmd_sessions(args: argparse.Namespace) -> None:
    sessions = asyncio.run(TmuxClient(CommandRunner()).list_sessions())
    payload = [{"name": name, "ordinal": session_ordinal(name)} for name in sessions]
    print(json.dumps(payload, indent=2))


def cmd_windows(args: argparse.Namespace) -> None:
    settings = WtLaunchSettings()
    app_name = args.app or load_profile(settings, args.profile).window_app
    windows = asyncio.run(AerospaceInventory(CommandRunner()).list_windows(app_name))
    print(json.dumps({"app": app_name, "windows": sorted(windows)}, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="wtlaunch diagnostics")
    parser.add_argument("--profile", default=None, help="Launch profile id")
    sub = parser.add_subparsers(dest="cmd")

    p_deps = sub.add_parser("deps", help="Show where required tools resolve on PATH")
    p_deps.set_defaults(func=cmd_deps)

    p_names = sub.add_parser("names", help="Show derived names for branches")
    p_names.add_argument("branches", nargs="+")
    p_names.set_defaults(func=cmd_names)

    p_sessions = sub.add_parser("sessions", help="List tmux sessions and their ordinals")
    p_sessions.set_defaults(func=cmd_sessions)

    p_windows = sub.add_parser("windows", help="List window ids for the profile's application")
    p_windows.add_argument("--app", default=None, help="Application name filter")
    p_windows.set_defaults(func=cmd_windows)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
