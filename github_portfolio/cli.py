"""CLI commands for the portfolio scout."""

import argparse
import asyncio
import logging
import sys

from .session import PortfolioSession
from .summary import RepoSort, build_summary, profile_links, sort_repos


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _print_rate_limit(session: PortfolioSession) -> None:
    status = session.gate.status
    if status is None:
        print("Rate limit: unknown")
        return
    line = f"Rate limit: {status.remaining}/{status.limit} requests left"
    if session.rate_limited:
        line += f", resets in {session.gate.countdown()}"
    print(line)


async def _search(session: PortfolioSession, handle: str, shallow: bool) -> bool:
    portfolio = await session.search(handle, deep_scan=not shallow)
    if portfolio is None:
        print(session.error or f"Nothing to search for {handle!r}.", file=sys.stderr)
        return False
    print(f"Building knowledge base for {portfolio.profile.login}...", flush=True)
    await session.wait_for_knowledge_base()
    return True


async def run_search(handle: str, shallow: bool, sort: str) -> int:
    async with PortfolioSession() as session:
        if not await _search(session, handle, shallow):
            return 1
        portfolio = session.portfolio
        summary = build_summary(portfolio.profile, portfolio.repos)

        print()
        for line in summary.lines:
            print(line)
        if summary.suggestions:
            print("\nSuggestions:")
            for line in summary.suggestions:
                print(f"  - {line}")
        for label, href in profile_links(portfolio.profile):
            print(f"{label}: {href}")

        repo_sort = RepoSort(sort)
        print(f"\nTop repos ({repo_sort.label}):")
        for repo in sort_repos(portfolio.repos, repo_sort):
            print(
                f"  {repo.name:<30} {repo.stargazers_count:>6} stars {repo.forks_count:>5} forks"
                f"  {repo.language or '-'}"
            )

        kb = session.knowledge_base
        if kb is None:
            print("\nKnowledge base unavailable (rate limited).")
        else:
            print(f"\nSkills ({len(kb.skills)}): {', '.join(kb.skills)}")
        _print_rate_limit(session)
    return 0


async def run_chat(handle: str, question: str | None, shallow: bool) -> int:
    async with PortfolioSession() as session:
        if not await _search(session, handle, shallow):
            return 1
        print(f"bot: {session.messages[0].content}")
        if question is not None:
            print(f"bot: {session.ask(question)}")
            return 0

        print("Type 'exit' to quit.\n")
        while True:
            try:
                q = (await asyncio.to_thread(input, "you: ")).strip()
            except (EOFError, KeyboardInterrupt):
                break
            if not q:
                continue
            if q.lower() in {"exit", "quit"}:
                break
            print(f"bot: {session.ask(q)}")
    return 0


async def run_rate_limit() -> int:
    async with PortfolioSession() as session:
        if await session.poll_rate_limit() is None:
            print("Unable to load rate limit status.", file=sys.stderr)
            return 1
        _print_rate_limit(session)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="portfolio-scout",
        description="Build a skill index from a GitHub user's repositories and query it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log requests and knowledge base builds",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # search subcommand
    search_parser = subparsers.add_parser(
        "search",
        help="Summarize a user's profile, top repos and inferred skills",
    )
    search_parser.add_argument("handle", help="GitHub username")
    search_parser.add_argument(
        "--shallow",
        action="store_true",
        help="Only scan READMEs of the 10 most-starred repos",
    )
    search_parser.add_argument(
        "--sort",
        choices=[s.value for s in RepoSort],
        default=RepoSort.STARS.value,
        help="Order for the top repos list (default: stars)",
    )

    # chat subcommand
    chat_parser = subparsers.add_parser(
        "chat",
        help="Ask questions about a user's skills and repos",
    )
    chat_parser.add_argument("handle", help="GitHub username")
    chat_parser.add_argument(
        "question",
        nargs="?",
        default=None,
        help="Question to ask. If omitted, enter interactive mode.",
    )
    chat_parser.add_argument(
        "--shallow",
        action="store_true",
        help="Only scan READMEs of the 10 most-starred repos",
    )

    # rate-limit subcommand
    subparsers.add_parser(
        "rate-limit",
        help="Show the remaining GitHub API quota",
    )

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "search":
        return asyncio.run(run_search(args.handle, args.shallow, args.sort))
    elif args.command == "chat":
        return asyncio.run(run_chat(args.handle, args.question, args.shallow))
    elif args.command == "rate-limit":
        return asyncio.run(run_rate_limit())
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
